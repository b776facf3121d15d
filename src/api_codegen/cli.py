"""CLI entry point for api-codegen."""

import logging
import sys
from pathlib import Path

import click

from api_codegen.config import CodegenConfig, FrameworkType, load_config
from api_codegen.errors import CodegenError
from api_codegen.parser.base import ApiDefinition
from api_codegen.parser.loader import FORMATS, parse_file
from api_codegen.pipeline import generate_all
from api_codegen.validator.analyzer import analyze, summarize
from api_codegen.validator.fixer import FIXABLE_CODES, fix
from api_codegen.validator.structure import validate


def _load(doc_path: Path, fmt: str) -> ApiDefinition:
    """Parse the document, or print the error and exit with status 1."""
    click.echo(f"Parsing {doc_path} (format: {fmt})...")
    try:
        definition = parse_file(doc_path, fmt)
    except CodegenError as e:
        click.echo(f"Parse failed: {e}", err=True)
        sys.exit(1)
    click.echo(f"Found {len(definition.apis)} APIs.")
    return definition


def _require_valid(definition: ApiDefinition) -> None:
    result = validate(definition)
    if not result.valid:
        click.echo(result.error_message(), err=True, nl=False)
        sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """api-codegen: validate API schemas and generate Java controllers and DTOs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


_format_option = click.option(
    "--format", "fmt", default="auto", type=click.Choice(list(FORMATS)), help="Document format."
)


@main.command("validate")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_format_option
def validate_cmd(doc_path: Path, fmt: str):
    """Check an API schema for structural errors."""
    definition = _load(doc_path, fmt)
    _require_valid(definition)
    click.echo("Validation passed.")


@main.command("analyze")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_format_option
def analyze_cmd(doc_path: Path, fmt: str):
    """Report missing or suspicious field constraints."""
    definition = _load(doc_path, fmt)
    issues = analyze(definition)
    for issue in issues:
        click.echo(f"  {issue.api}: {issue}")

    summary = summarize(issues)
    click.echo(
        f"{summary.total_count} issue(s): {summary.error_count} error(s), "
        f"{summary.warning_count} warning(s), {summary.info_count} info"
    )
    if summary.has_errors:
        sys.exit(1)


@main.command("fix")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write the fixed schema here instead of overwriting the input.")
@_format_option
def fix_cmd(doc_path: Path, output: Path | None, fmt: str):
    """Add missing constraints and write the schema back as native YAML."""
    definition = _load(doc_path, fmt)
    _require_valid(definition)

    issues = analyze(definition)
    fixable = [i for i in issues if i.code in FIXABLE_CODES]
    click.echo(f"Fixing {len(fixable)} of {len(issues)} issue(s)...")
    fixed = fix(definition, issues)

    target = output or doc_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(fixed, encoding="utf-8")
    click.echo(f"Fixed schema saved to {target}")


@main.command("generate")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for generated sources.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
@click.option("--framework", default=None, type=click.Choice(["jaxrs", "cxf", "spring"]), help="Target framework (overrides config).")
@click.option("--base-package", default=None, help="Base Java package (overrides config).")
@click.option("--unified", is_flag=True, default=False, help="Emit a single controller for all APIs.")
@_format_option
def generate_cmd(
    doc_path: Path,
    output: Path,
    config_path: Path | None,
    framework: str | None,
    base_package: str | None,
    unified: bool,
    fmt: str,
):
    """Generate controllers, request and response classes."""
    try:
        config = load_config(config_path)
    except CodegenError as e:
        click.echo(f"Config error: {e}", err=True)
        sys.exit(1)
    config = _apply_overrides(config, framework, base_package, unified)

    definition = _load(doc_path, fmt)
    _require_valid(definition)

    click.echo(f"Generating code (framework: {config.framework.value})...")
    try:
        artifacts = generate_all(definition, config)
    except CodegenError as e:
        click.echo(f"Generation failed: {e}", err=True)
        sys.exit(1)

    files = artifacts.all_files()
    for rel_path, content in files.items():
        file_path = output / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Generated {len(files)} files in {output}")


def _apply_overrides(config: CodegenConfig, framework: str | None, base_package: str | None, unified: bool) -> CodegenConfig:
    updates = {}
    if framework:
        updates["framework"] = FrameworkType(framework)
    if base_package:
        updates["base_package"] = base_package
    if unified:
        updates["unified_controller"] = True
    return config.model_copy(update=updates) if updates else config
