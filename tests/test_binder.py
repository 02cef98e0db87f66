import inspect

import pytest
from pytest import raises

from lineage import bind, BoundCallable, MisuseError


class Handler:
    def __init__(self, message="Event handled"):
        self.message = message


def capture(this, *args, **kwargs):
    return this, args, kwargs


@pytest.mark.parametrize("args", [(), (1,), ("a", "b", "c")])
def test_bound_callable_passes_context_and_arguments(args):
    context = Handler()
    bound = bind(capture, context)

    assert bound(*args) == capture(context, *args)
    assert bound(*args)[0] is context


def test_preset_arguments_lead_call_arguments():
    context = Handler()
    bound = bind(capture, context, "p1", "p2")

    assert bound("a1", "a2") == (context, ("p1", "p2", "a1", "a2"), {})


def test_call_keywords_override_preset_keywords():
    bound = bind(capture, None, sep=",", end="\n")

    assert bound(end="!") == (None, (), {"sep": ",", "end": "!"})


def test_preset_keywords_can_use_bind_parameter_names():
    bound = bind(capture, None, func="f", context="c")

    assert bound() == (None, (), {"func": "f", "context": "c"})


def test_context_is_held_by_reference():
    context = Handler()
    bound = bind(lambda this: this.message, context)

    context.message = "changed"
    assert bound() == "changed"


def test_none_context():
    bound = bind(lambda _, value: value * 2, None)

    assert bound(21) == 42


def test_invocations_are_independent():
    calls = []
    bound = bind(lambda this, value: calls.append((this, value)), "ctx", "preset")

    bound()
    bound()
    assert calls == [("ctx", "preset"), ("ctx", "preset")]
    assert bound.args == ("preset",)


def test_rebinding_keeps_original_context():
    first = Handler("first")
    bound = bind(capture, first, 1)
    rebound = bind(bound, Handler("second"), 2)

    assert rebound(3) == (first, (1, 2, 3), {})
    assert rebound.func is capture


def test_bound_callable_is_immutable():
    bound = bind(capture, Handler())

    with raises(AttributeError):
        bound.context = Handler()

    with raises(AttributeError):
        del bound.func

    with raises(TypeError):
        bound.keywords["extra"] = 1


def test_bound_callable_copies_wrapped_metadata():
    def handle_click(this, event):
        """Handles clicks."""

    bound = bind(handle_click, Handler())

    assert isinstance(bound, BoundCallable)
    assert bound.__name__ == "handle_click"
    assert bound.__doc__ == "Handles clicks."
    assert bound.__wrapped__ is handle_click


def toggle(this, a, b, *, flag=False):
    return this, a, b, flag


@pytest.mark.parametrize(
    "func, args, kwargs, expected",
    [
        (toggle, (1,), {}, "(b, *, flag=False)"),
        (toggle, (), {"flag": True}, "(a, b, *, flag=True)"),
        (toggle, (), {"a": 1}, "(*, a=1, b, flag=False)"),
        (capture, (1,), {"flag": True}, "(*args, **kwargs)"),
    ],
)
def test_signature_reflects_context_and_presets(func, args, kwargs, expected):
    bound = bind(func, "ctx", *args, **kwargs)

    assert str(inspect.signature(bound)) == expected


def test_rebinding_signature_drops_all_presets():
    bound = bind(bind(toggle, "ctx", 1), "ignored", 2)

    assert str(inspect.signature(bound)) == "(*, flag=False)"
    assert bound() == ("ctx", 1, 2, False)


def test_errors_propagate_unchanged():
    error = ValueError("boom")

    def fail(this):
        raise error

    with raises(ValueError) as exc_info:
        bind(fail, None)()

    assert exc_info.value is error


def test_cannot_bind_non_callable():
    with raises(MisuseError):
        bind("not callable", None)


def test_repr():
    bound = bind(capture, "ctx", 1, flag=True)

    assert repr(bound) == f"BoundCallable({capture!r}, 'ctx', 1, flag=True)"
