from __future__ import annotations

from fastapi.templating import Jinja2Templates

from numfmt.extension import NumberFormatterExtension
from numfmt.templates import configure_templates, create_environment


def test_create_environment_keeps_extra_extensions() -> None:
    env = create_environment(extensions=["jinja2.ext.do"], autoescape=True)

    assert "jinja2.ext.ExprStmtExtension" in env.extensions
    assert NumberFormatterExtension.identifier in env.extensions
    assert env.autoescape is True


def test_configure_templates_installs_extension(tmp_path) -> None:
    templates = Jinja2Templates(directory=str(tmp_path))

    assert configure_templates(templates) is templates
    configure_templates(templates)

    formatter = templates.env.number_formatter
    formatter.set_locale("en_US").set_currency("USD")
    rendered = templates.env.from_string(
        "{{ 2500000|number_human(1) }} {{ 5|currency_format }}{{ currency_symbol('EUR') }}"
    ).render()

    assert rendered == "2.5 M $5.00 €"


def test_fastapi_template_file_rendering(tmp_path) -> None:
    (tmp_path / "report.html").write_text(
        "{{ total|currency_format(currency='EUR', locale='de_DE') }}", encoding="utf-8"
    )
    templates = configure_templates(Jinja2Templates(directory=str(tmp_path)))

    rendered = templates.get_template("report.html").render(total=1500)

    assert rendered == "1.500,00\xa0€"
