# tests/e2e/test_service_e2e.py
"""
Testes end-to-end de serviços declarados.

Cenários:
    - coerção de argumento ("25" → 25) vs validador estrito
    - serviço com argumentos, outputs, steps condicionais e always
    - configuração por arquivo aplicada ao processo

Estes testes exercitam a superfície pública (`atlas_services`) apenas.
"""

from pathlib import Path

import pytest

from atlas_services import (
    Argument,
    ArgumentTypeError,
    Coerce,
    Nilable,
    OneOf,
    Output,
    Service,
    config,
    step,
)


class CoercedAge(Service):
    age = Argument(Coerce(int))
    doubled = Output(int)

    @step
    def double(self):
        self.doubled = self.age * 2


class StrictAge(Service):
    age = Argument(int)

    @step
    def noop(self):
        pass


def test_coercible_age_becomes_integer():
    service = CoercedAge.run(age="25")

    assert service.age == 25
    assert service.arguments["age"] == 25
    assert service.doubled == 50


def test_strict_age_rejects_string():
    with pytest.raises(ArgumentTypeError) as exc:
        StrictAge.run(age="25")

    assert exc.value.details["field"] == "age"
    assert exc.value.details["value"] == "'25'"


class PublishArticle(Service):
    title = Argument(str)
    status = Argument(OneOf("draft", "published"), default="draft")
    notes = Argument(Nilable(str), optional=True)

    slug = Output(str)
    published = Output(bool, default=False)
    audit = Output(list, default=[])

    @step
    def build_slug(self):
        if not self.title.strip():
            self.fail("can't be blank", key="title")
            return
        self.slug = "-".join(self.title.lower().split())

    @step(if_=lambda service: service.status == "published")
    def publish(self):
        self.published = True

    @step(always=True)
    def record(self):
        self.audit.append(self.title)


def test_article_flow_success():
    service = PublishArticle.run(title="Hello World", status="published")

    assert service.success
    assert service.slug == "hello-world"
    assert service.published is True
    assert service.audit == ["Hello World"]
    assert service.outputs.to_dict() == {
        "slug": "hello-world",
        "published": True,
        "audit": ["Hello World"],
    }


def test_article_flow_failure_collects_error_and_runs_always():
    service = PublishArticle.run(title="   ")

    assert service.failed
    assert service.errors.to_dict() == {"title": ["can't be blank"]}
    assert service.published is False
    assert service.audit == ["   "]


def test_config_file_drives_policy(tmp_path: Path):
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text("services:\n  break_on_error: false\n", encoding="utf-8")
    config.load_file(str(defaults))

    class TwoErrors(Service):
        @step
        def first(self):
            self.fail("first")

        @step
        def second(self):
            self.fail("second")

    assert TwoErrors.run().errors.to_dict() == {"base": ["first", "second"]}
