from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .batch import BatchReport

ARROW = " → "


def format_path(path: list[str]) -> str:
    return ARROW.join(path)


def render_html(report: BatchReport, output_path: Path, title: str) -> None:
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["format_path"] = format_path
    template = env.get_template("report.html")

    html = template.render(
        title=title,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        report=report,
        results=[
            {"index": i, "result": result}
            for i, result in enumerate(report.results, start=1)
        ],
        most_common=report.most_common(),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")


def render_markdown(report: BatchReport, output_path: Path, title: str) -> None:
    lines = [f"# {title}", "", "## Summary", ""]
    lines.extend(f"- {line}" for line in summary_lines(report))
    lines.append("")

    common = report.most_common()
    if common:
        lines.append("## Most common articles in paths")
        lines.append("")
        for rank, (article, count) in enumerate(common, start=1):
            lines.append(f'{rank}. "{article}" appeared in {count} paths')
        lines.append("")

    lines.append("## Paths")
    lines.append("")
    for index, result in enumerate(report.results, start=1):
        lines.append(f"### Path {index}: {result.start}")
        lines.append(f"- Outcome: {result.outcome.value}{' (cached)' if result.cached else ''}")
        lines.append(f"- Length: {len(result.path)} articles")
        lines.append(f"- Path: {format_path(result.path)}")
        if result.error:
            lines.append(f"- Error: {result.error}")
        lines.append("")

    if report.failures:
        lines.append("## Failures")
        lines.append("")
        for failure in report.failures:
            lines.append(f"- Test #{failure.index}: {failure.error}")
        lines.append("")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines), encoding="utf-8")


def summary_lines(report: BatchReport) -> list[str]:
    """Plain-text summary statistics shared by the console and markdown output."""
    lines = [
        f"Total paths tested: {report.total}",
        f"Paths that reached {report.target}: {len(report.successful)} ({report.success_rate:.2f}%)",
    ]
    if report.average_length is not None:
        lines.append(f"Average path length: {report.average_length:.2f} articles")
        lines.append(f"Shortest path: {report.shortest} articles")
        lines.append(f"Longest path: {report.longest} articles")
    if report.failures:
        lines.append(f"Failed traversals: {len(report.failures)}")
    return lines
