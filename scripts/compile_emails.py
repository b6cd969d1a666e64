#!/usr/bin/env python3
"""Inline CSS and minify the Jinja2 email templates.

Sources live in userbase/templates/emails/*.j2; the runtime renders the
compiled copies in userbase/templates/emails/compiled/*.html.

Usage:
    python scripts/compile_emails.py
"""

from pathlib import Path

import css_inline
import minify_html
from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).parent.parent / "userbase" / "templates" / "emails"
OUTPUT_DIR = TEMPLATES_DIR / "compiled"

# Template name -> variables left for render time
TEMPLATES = {
    "welcome.j2": ["user_name", "app_name"],
}

# Placeholder text the minifier leaves untouched
MARKER = "__jinja_var_{}__"


def compile_template(
    env: Environment, template_name: str, variables: list[str]
) -> Path:
    """Compile one template and return the output path."""
    context = {var: MARKER.format(var) for var in variables}
    html_content = env.get_template(template_name).render(**context)

    html_content = css_inline.inline(html_content)
    html_content = minify_html.minify(html_content, minify_css=True)

    for var in variables:
        html_content = html_content.replace(MARKER.format(var), f"{{{{ {var} }}}}")

    output_path = OUTPUT_DIR / (Path(template_name).stem + ".html")
    output_path.write_text(html_content + "\n", encoding="utf-8")
    return output_path


def main() -> None:
    OUTPUT_DIR.mkdir(exist_ok=True)
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )

    for template_name, variables in TEMPLATES.items():
        if not (TEMPLATES_DIR / template_name).exists():
            print(f"  missing: {template_name}")
            continue
        output_path = compile_template(env, template_name, variables)
        print(f"  {template_name} -> {output_path.name}")


if __name__ == "__main__":
    main()
