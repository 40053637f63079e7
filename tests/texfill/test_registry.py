import pytest

from texfill.loader import DECODERS, decode_data, decode_file, decode_remote
from texfill.registry import new_registry


def test_new_registry():
    registry, register = new_registry(attribute="schemes")

    @register("a", "b")
    def handler():
        return 1

    assert registry == {"a": handler, "b": handler}
    assert handler.schemes == ("a", "b")


def test_register_duplicate():
    registry, register = new_registry()

    @register("a")
    def first():
        pass

    with pytest.raises(ValueError):

        @register("a")
        def second():
            pass

    assert registry["a"] is first


def test_register_requires_key():
    _, register = new_registry()
    with pytest.raises(ValueError):
        register()


def test_decoder_registry():
    assert DECODERS[""] is decode_file
    assert DECODERS["file"] is decode_file
    assert DECODERS["data"] is decode_data
    assert DECODERS["http"] is decode_remote
    assert DECODERS["https"] is decode_remote
