import pytest

from nomiscript.environment import Environment
from nomiscript.errors import EnvError
from nomiscript.natives import create_global_env
from nomiscript.values import BooleanVal, NativeFnVal, NullVal, NumberVal


def test_declare_and_lookup():
    env = Environment()
    env.declare("x", NumberVal(1))
    assert env.lookup("x") == NumberVal(1)


def test_declare_returns_value():
    env = Environment()
    assert env.declare("x", NumberVal(4)) == NumberVal(4)


def test_duplicate_declaration_in_same_scope_fails():
    env = Environment()
    env.declare("x", NumberVal(1))
    with pytest.raises(EnvError):
        env.declare("x", NumberVal(2))
    assert env.lookup("x") == NumberVal(1)


def test_shadowing_in_child_scope():
    parent = Environment()
    parent.declare("x", NumberVal(1))
    child = Environment(parent=parent)
    child.declare("x", NumberVal(2))
    assert child.lookup("x") == NumberVal(2)
    assert parent.lookup("x") == NumberVal(1)


def test_lookup_walks_parents():
    root = Environment()
    root.declare("x", NumberVal(1))
    leaf = Environment(parent=Environment(parent=root))
    assert leaf.lookup("x") == NumberVal(1)
    assert leaf.resolve("x") is root


def test_lookup_unresolved_fails():
    with pytest.raises(EnvError) as exc:
        Environment(parent=Environment()).lookup("missing")
    assert "missing" in exc.value.message


def test_assign_updates_owning_scope():
    root = Environment()
    root.declare("x", NumberVal(1))
    child = Environment(parent=root)
    child.assign("x", NumberVal(5))
    assert root.lookup("x") == NumberVal(5)
    assert not child.has("x")


def test_assign_unresolved_fails():
    with pytest.raises(EnvError):
        Environment().assign("nope", NumberVal(1))


@pytest.mark.parametrize("depth", [0, 1, 3])
def test_assign_to_constant_fails_at_any_depth(depth):
    root = Environment()
    root.declare("k", NumberVal(1), constant=True)
    env = root
    for _ in range(depth):
        env = Environment(parent=env)
    with pytest.raises(EnvError):
        env.assign("k", NumberVal(2))
    assert root.lookup("k") == NumberVal(1)


def test_constants_are_only_tracked_for_bound_names():
    env = Environment()
    env.declare("a", NumberVal(1), constant=True)
    env.declare("b", NumberVal(2))
    assert env.constants <= set(env.bindings)
    assert env.is_constant("a")
    assert not env.is_constant("b")


def test_child_may_shadow_a_constant():
    root = Environment()
    root.declare("k", NumberVal(1), constant=True)
    child = Environment(parent=root)
    child.declare("k", NumberVal(2))
    child.assign("k", NumberVal(3))
    assert child.lookup("k") == NumberVal(3)


def test_global_env_builtins(fake):
    env = create_global_env(fake.as_host())
    assert env.lookup("true") == BooleanVal(True)
    assert env.lookup("false") == BooleanVal(False)
    assert env.lookup("null") == NullVal()
    assert isinstance(env.lookup("print"), NativeFnVal)
    assert isinstance(env.lookup("time"), NativeFnVal)
    for name in ("true", "false", "null", "print", "time"):
        assert env.is_constant(name)
        with pytest.raises(EnvError):
            env.assign(name, NullVal())
