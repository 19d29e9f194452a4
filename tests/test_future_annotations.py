"""Tests for PEP 563 compatibility (from __future__ import annotations).

When `from __future__ import annotations` is active, all type hints become
strings at runtime. The injector must resolve them via typing.get_type_hints().
"""

from __future__ import annotations

import inspect
from typing import Annotated, List, Optional

import pytest

from pico_registry import Container
from pico_registry.analysis import analyze_callable_dependencies, import_key

# --- Plain classes for unit tests ---


class Repo:
    pass


class Service:
    def __init__(self, repo: Repo):
        self.repo = repo


class OptionalService:
    def __init__(self, repo: Repo, name: Optional[str] = None):
        self.repo = repo
        self.name = name


class ListService:
    def __init__(self, repos: List[Repo], *args, tag: Annotated[Repo, "meta"], **kwargs):
        self.repos = repos
        self.tag = tag


class Unresolvable:
    def __init__(self, dep: NotDefinedAnywhere = None):
        self.dep = dep


# --- Unit Tests: analyze_callable_dependencies ---


class TestAnalyzeCallableDependencies:
    def test_resolves_string_annotations(self):
        deps = analyze_callable_dependencies(Service)
        assert len(deps) == 1
        assert deps[0].parameter_name == "repo"
        assert deps[0].position == 0
        assert deps[0].key is Repo
        assert not deps[0].has_default

    def test_resolves_optional_annotations(self):
        deps = analyze_callable_dependencies(OptionalService)
        repo_dep, name_dep = deps
        assert repo_dep.key is Repo
        assert name_dep.is_optional
        assert name_dep.key is None
        assert name_dep.has_default

    def test_generics_are_not_keys_and_varargs_are_skipped(self):
        deps = analyze_callable_dependencies(ListService)
        assert [d.parameter_name for d in deps] == ["repos", "tag"]
        assert deps[0].key is None
        assert deps[1].key is Repo
        assert deps[1].is_keyword_only
        assert deps[1].kind is inspect.Parameter.KEYWORD_ONLY

    def test_unresolvable_forward_reference_stays_a_string_key(self):
        deps = analyze_callable_dependencies(Unresolvable)
        assert deps[0].key == "NotDefinedAnywhere"

    def test_bound_method_excludes_self(self):
        class WithSetter:
            def set_repo(self, repo: Repo):
                pass

        deps = analyze_callable_dependencies(WithSetter().set_repo)
        assert [(d.parameter_name, d.key) for d in deps] == [("repo", Repo)]

    def test_uninspectable_callable_raises(self):
        with pytest.raises((ValueError, TypeError)):
            analyze_callable_dependencies(42)


class TestImportKey:
    def test_dotted_and_colon_forms(self):
        assert import_key("pico_registry.container.Container") is Container
        assert import_key("pico_registry.container:Container") is Container

    def test_non_class_or_missing(self):
        assert import_key("pico_registry.constants.PLACEHOLDER") is None
        assert import_key("Container") is None
        assert import_key("pico_registry.nope.Thing") is None


def test_container_autowires_string_annotations():
    c = Container()
    c.share(Repo)
    assert c.get(Service).repo is c.get(Repo)


def test_unresolvable_forward_reference_uses_default():
    assert Container().get(Unresolvable).dep is None


class PartlyResolvable:
    def __init__(self, repo: Repo, extra: Optional[NotDefinedAnywhere] = None):
        self.repo = repo
        self.extra = extra


def test_one_unresolvable_hint_keeps_the_others():
    deps = analyze_callable_dependencies(PartlyResolvable)
    assert deps[0].key is Repo
    assert isinstance(deps[1].key, str)


def test_partly_resolvable_constructor_is_autowired():
    c = Container()
    c.share(Repo)
    built = c.get(PartlyResolvable)
    assert built.repo is c.get(Repo)
    assert built.extra is None
