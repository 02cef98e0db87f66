#!/usr/bin/env python3
"""
Demonstration of function binding and type composition in lineage.

The first half wires handlers to simulated buttons, showing why a handler must be bound to its context. The second
half composes a subtype over a supertype and checks capability queries in both directions.
"""

from lineage import (
    bind, bind_method, compose, define_type, EventSource, invoke, is_instance_of, MethodNotFound, new_instance,
)


class Handler:
    message = "Event handled"


def handle_click(this, event):
    print(f"{this.message}: {event.type}")


def binding_demo():
    print("=== Function binding ===")
    handler = Handler()

    bound_button = EventSource(name="user-defined-bind-btn")
    bound_button.add_listener("click", bind(handle_click, handler))
    bound_button.dispatch("click")  # Event handled: click

    unbound_button = EventSource(name="no-bind-btn")
    unbound_button.message = "This isn't the right context!"
    unbound_button.add_listener("click", handle_click)
    unbound_button.dispatch("click")  # This isn't the right context!: click


@define_type
def SuperType(this, name):
    this.name = name
    this.colors = ["red", "blue", "green"]


@SuperType.method
def say_name(this):
    print(this.name)


@define_type
def SubType(this, age):
    this.age = age


@SubType.method
def say_age(this):
    print(f"{this.name} is {this.age}.")


@SubType.method
def on_click(this, event):
    print(f"{this.name} handled {event.type}")


def composition_demo():
    print("\n=== Type composition ===")
    composed = compose(SubType, SuperType)

    sub_instance = new_instance(composed, "Charlie", 22)
    print(is_instance_of(sub_instance, SuperType))  # True
    print(is_instance_of(sub_instance, composed))  # True
    sub_instance.say_age()  # Charlie is 22.

    super_instance = new_instance(SuperType, "Charlie")
    print(is_instance_of(super_instance, SuperType))  # True
    print(is_instance_of(super_instance, composed))  # False
    try:
        invoke(super_instance, "say_age")
    except MethodNotFound as e:
        print(f"Error: {e}")

    button = EventSource(name="on-click-btn")
    button.add_listener("click", bind_method(sub_instance, "on_click"))
    button.dispatch("click")  # Charlie handled click


if __name__ == "__main__":
    binding_demo()
    composition_demo()
