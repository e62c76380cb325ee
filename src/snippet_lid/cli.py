from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .batch import evaluate_jsonl, process_jsonl_batch
from .classifier import LanguageClassifier
from .config import ClassifierConfig
from .doctor import collect_doctor_info
from .errors import EmptyInputError, SnippetLidError
from .logging_config import setup_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)
_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log model loading to stderr."),
) -> None:
    """Detect the programming language of a code snippet."""
    if verbose:
        setup_logging("DEBUG")


def _classifier(model: Optional[Path], max_chars: Optional[int]) -> LanguageClassifier:
    cfg = ClassifierConfig(
        model_path=None if model is None else str(model),
        max_input_chars=max_chars,
    )
    try:
        return LanguageClassifier(config=cfg)
    except (OSError, SnippetLidError) as e:
        _err_console.print(f"[red]Could not load model:[/red] {e}")
        raise typer.Exit(code=2)


@app.command()
def detect(
    text: Optional[str] = typer.Argument(
        None, help="Snippet to classify. Reads --file or stdin when omitted."
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Classify this file."
    ),
    model: Optional[Path] = typer.Option(None, help="Model asset (JSON) to use."),
    max_chars: Optional[int] = typer.Option(None, help="Only classify the first N characters."),
    scores: bool = typer.Option(
        False,
        "--scores",
        help="Write the vote table to stderr as JSON (stdout remains the bare label).",
    ),
) -> None:
    """Print the detected language symbol."""
    clf = _classifier(model, max_chars)
    if text is None:
        if file is not None:
            text = file.read_text(encoding="utf-8", errors="replace")
        else:
            text = sys.stdin.read()

    try:
        result = clf.analyze(text)
    except EmptyInputError as e:
        _err_console.print(f"[red]Nothing to classify:[/red] {e}")
        raise typer.Exit(code=1)

    _console.print(result.language)
    if scores:
        sys.stderr.write(
            json.dumps(
                {
                    "language": result.language,
                    "n_tokens": result.n_tokens,
                    "n_known_tokens": result.n_known_tokens,
                    "votes": result.votes,
                },
                ensure_ascii=True,
            )
            + "\n"
        )


@app.command()
def labels(
    model: Optional[Path] = typer.Option(None, help="Model asset (JSON) to use."),
) -> None:
    """List the language symbols the model can emit."""
    clf = _classifier(model, None)
    for symbol in clf.model.labels.languages():
        _console.print(symbol)


@app.command()
def batch(
    in_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Input JSONL file."),
    out_path: Path = typer.Argument(..., help="Output JSONL file (directories auto-created)."),
    text_key: str = typer.Option("text", help="Record key holding the snippet."),
    output_key: str = typer.Option("language", help="Record key to write the label to."),
    model: Optional[Path] = typer.Option(None, help="Model asset (JSON) to use."),
) -> None:
    """Classify every record of a JSONL file."""
    clf = _classifier(model, None)
    summary = process_jsonl_batch(
        in_path, out_path, text_key=text_key, output_key=output_key, classifier=clf
    )
    typer.echo(json.dumps(asdict(summary), ensure_ascii=True))


@app.command()
def evaluate(
    in_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Labeled JSONL file."),
    text_key: str = typer.Option("text", help="Record key holding the snippet."),
    label_key: str = typer.Option("language", help="Record key holding the expected label."),
    report: Optional[Path] = typer.Option(
        None, help="Write a JSON report to this path (directories auto-created)."
    ),
    model: Optional[Path] = typer.Option(None, help="Model asset (JSON) to use."),
) -> None:
    """Report accuracy of the model on labeled snippets."""
    clf = _classifier(model, None)
    summary = evaluate_jsonl(in_path, text_key=text_key, label_key=label_key, classifier=clf)
    payload = json.dumps(asdict(summary), ensure_ascii=True, indent=2)
    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(payload + "\n", encoding="utf-8")
        _console.print(f"[green]Wrote report:[/green] {report}")
    else:
        typer.echo(payload)


@app.command()
def doctor() -> None:
    """Print an environment + model report as JSON."""
    typer.echo(json.dumps(collect_doctor_info(), ensure_ascii=True, indent=2))
