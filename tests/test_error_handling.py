"""
Tests for error handling: lookups that miss, misuse of the API, and errors raised by user code.

Errors raised inside bound callables, methods, and construction procedures must reach the caller unchanged, while
lineage's own errors are distinguishable by type.
"""
import pytest

from lineage import (
    bind_method, compose, ComposedType, invoke, LineageError, MethodNotFound, MisuseError, new_instance, Registry,
    TypeDescriptor,
)


@pytest.fixture
def person():
    descriptor = TypeDescriptor("Person", lambda this, name: setattr(this, "name", name))
    descriptor.add_method("say_name", lambda this: this.name)
    descriptor.add_method("say_age", lambda this: f"{this.name} is {this.age}.")
    return descriptor


class TestMethodNotFound:
    def test_missing_method(self, person):
        instance = new_instance(person, "Charlie")

        with pytest.raises(MethodNotFound) as exc_info:
            invoke(instance, "fly")

        error = exc_info.value
        assert isinstance(error, LineageError)
        assert error.type_name == "Person"
        assert error.method_name == "fly"
        assert str(error) == "Person has no method 'fly'"

    def test_bind_method_fails_at_bind_time(self, person):
        with pytest.raises(MethodNotFound):
            bind_method(new_instance(person, "Charlie"), "fly")

    def test_capability_is_structural(self, person):
        # A method on an unrelated composed type is not reachable from a plain instance
        student = TypeDescriptor("Student", lambda this, school: setattr(this, "school", school))
        student.add_method("study", lambda this: f"{this.name} studies at {this.school}")
        composed = compose(student, person)

        assert invoke(new_instance(composed, "Charlie", "MIT"), "study") == "Charlie studies at MIT"
        with pytest.raises(MethodNotFound):
            invoke(new_instance(person, "Charlie"), "study")


class TestUserErrorsPropagate:
    def test_method_errors_are_not_wrapped(self, person):
        instance = new_instance(person, "Charlie")

        with pytest.raises(AttributeError) as exc_info:
            invoke(instance, "say_age")

        assert not isinstance(exc_info.value, LineageError)

    def test_construction_errors_are_not_wrapped(self, person):
        def explode(this, value):
            raise KeyError(value)

        composed = compose(TypeDescriptor("Exploding", explode), person)

        with pytest.raises(KeyError):
            new_instance(composed, "Charlie", "boom")

    def test_wrong_argument_count_is_a_type_error(self, person):
        with pytest.raises(TypeError):
            new_instance(person)

    @pytest.mark.parametrize("field", ["lineage_type", "lineage_registry"])
    def test_reserved_field_names(self, field):
        clashing = TypeDescriptor("Clashing", lambda this: setattr(this, field, "value"))

        with pytest.raises(AttributeError):
            new_instance(clashing)


class TestMisuse:
    @pytest.mark.parametrize("bad", [None, "Person", object(), lambda this: None])
    def test_compose_requires_descriptors(self, person, bad):
        with pytest.raises(MisuseError):
            compose(person, bad)

        with pytest.raises(MisuseError):
            compose(bad, person)

    def test_compose_over_itself(self, person):
        with pytest.raises(MisuseError):
            compose(person, person)

    def test_composed_type_cannot_gain_a_second_supertype(self, person):
        composed = compose(TypeDescriptor("Student", lambda this: None), person)

        with pytest.raises(MisuseError):
            compose(composed, TypeDescriptor("Other", lambda this: None))

    def test_undeterminable_forward_count(self):
        variadic = TypeDescriptor("Variadic", lambda this, *args: None)

        with pytest.raises(MisuseError, match="forwards"):
            compose(TypeDescriptor("Sub", lambda this: None), variadic)

    def test_descriptor_needs_callable_constructor(self):
        with pytest.raises(MisuseError):
            TypeDescriptor("Broken", None)

    def test_negative_forwards(self):
        with pytest.raises(ValueError):
            TypeDescriptor("Broken", lambda this: None, forwards=-1)

    def test_methods_must_be_callable(self, person):
        with pytest.raises(MisuseError):
            person.add_method("name", "Charlie")

    @pytest.mark.parametrize("bad", [None, "Person", ComposedType])
    def test_new_instance_requires_descriptor(self, bad):
        with pytest.raises(MisuseError):
            Registry().new_instance(bad)

    def test_invoke_requires_instance(self):
        with pytest.raises(MisuseError):
            invoke(object(), "say_name")

    def test_misuse_is_a_type_error(self):
        assert issubclass(MisuseError, TypeError)
