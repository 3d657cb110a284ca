"""Tests for refviz reference markers."""

import typing

import pytest

from refviz import Ref, RefDict, RefList


class TestRef:
    """Tests for Ref[T] marker."""

    def test_ref_origin(self) -> None:
        """Ref[T] should expose Ref as __origin__."""

        class Clock:
            pass

        assert Ref[Clock].__origin__ is Ref

    def test_ref_args(self) -> None:
        """Ref[T] should expose (T,) as __args__."""

        class Clock:
            pass

        assert Ref[Clock].__args__ == (Clock,)

    def test_ref_repr(self) -> None:
        """Ref[T] should have a readable repr."""

        class Clock:
            pass

        assert repr(Ref[Clock]) == "Ref[Clock]"

    def test_ref_forward_reference_repr(self) -> None:
        """Ref["T"] should repr the string argument."""
        assert repr(Ref["Clock"]) == "Ref['Clock']"

    def test_ref_equality_and_hash(self) -> None:
        """Ref[T] aliases should compare and hash by origin and args."""

        class A:
            pass

        class B:
            pass

        assert Ref[A] == Ref[A]
        assert hash(Ref[A]) == hash(Ref[A])
        assert Ref[A] != Ref[B]
        assert Ref[A] != RefList[A]

    def test_ref_wrong_arity(self) -> None:
        """Ref should reject more than one argument."""

        class A:
            pass

        with pytest.raises(TypeError, match=r"Ref\[T\]"):
            Ref[A, A]

    def test_ref_optional_union(self) -> None:
        """Ref[T] | None should build a typing.Union."""

        class A:
            pass

        optional = Ref[A] | None
        assert typing.get_origin(optional) is typing.Union
        assert Ref[A] in typing.get_args(optional)
        assert type(None) in typing.get_args(optional)

    def test_ref_reversed_optional_union(self) -> None:
        """None | Ref[T] should build a typing.Union too."""

        class A:
            pass

        optional = None | Ref[A]
        assert Ref[A] in typing.get_args(optional)


class TestRefList:
    """Tests for RefList[T] marker."""

    def test_reflist_alias(self) -> None:
        """RefList[T] should keep origin and args."""

        class Worker:
            pass

        alias = RefList[Worker]
        assert alias.__origin__ is RefList
        assert alias.__args__ == (Worker,)


class TestRefDict:
    """Tests for RefDict[K, V] marker."""

    def test_refdict_alias(self) -> None:
        """RefDict[K, V] should keep both arguments."""

        class Handler:
            pass

        alias = RefDict[str, Handler]
        assert alias.__origin__ is RefDict
        assert alias.__args__ == (str, Handler)
        assert repr(alias) == "RefDict[str, Handler]"

    def test_refdict_requires_two_arguments(self) -> None:
        """RefDict with a single argument should raise TypeError."""

        class Handler:
            pass

        with pytest.raises(TypeError, match=r"RefDict\[K, V\]"):
            RefDict[Handler]
