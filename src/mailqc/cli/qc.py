"""MailQC (mailqc) - email quality control for support agents.

Scores agent emails on tone, clarity, spelling/grammar and structure, keeps
the results per agent and reports on agent performance.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


def _score_style(score: float) -> str:
    if score >= 8:
        return "green"
    if score >= 6:
        return "yellow"
    return "red"


def _fail(ctx: click.Context, message: str) -> None:
    console.print(f"  [red]ERROR[/red] {escape(message)}")
    ctx.exit(1)


def _context(ctx: click.Context) -> tuple[Path, dict]:
    from ..core.config import get_effective_config

    project_path = Path(ctx.obj["project"])
    return project_path, get_effective_config(project_path)


def _repositories(ctx: click.Context):
    from ..core.config import open_store
    from ..storage import AgentRepository, QualityCheckRepository, SettingsRepository

    project_path, config = _context(ctx)
    store = open_store(config, project_path)
    return config, AgentRepository(store), QualityCheckRepository(store), SettingsRepository(store)


def _print_scoring(scoring, overall: int) -> None:
    from ..scoring.criteria import CRITERIA_BY_ID

    table = Table(title="Quality Scores")
    table.add_column("Criterion")
    table.add_column("Score", justify="right")
    table.add_column("Feedback")
    for result in scoring.scores:
        style = _score_style(result.score)
        table.add_row(
            CRITERIA_BY_ID[result.criteria_id].name,
            f"[{style}]{result.score}/10[/{style}]",
            escape(result.feedback),
        )
    console.print(table)
    style = _score_style(overall)
    console.print(f"Overall: [{style}]{overall}/10[/{style}]")
    console.print(escape(scoring.general_feedback))
    if scoring.recommendations:
        console.print("\n[bold]Recommendations[/bold]")
        for rec in scoring.recommendations:
            console.print(f"  - {escape(rec)}")


@click.group()
@click.pass_context
@click.option("--project", "-p", type=click.Path(file_okay=False), default=".", help="Project path")
def qc_cli(ctx: click.Context, project: str) -> None:
    """MailQC - score support emails and track agent quality."""
    ctx.ensure_object(dict)
    ctx.obj["project"] = project


@qc_cli.command()
@click.option("--name", "-n", type=str, default="", help="Project name")
@click.pass_context
def init(ctx: click.Context, name: str) -> None:
    """Initialize MailQC in a project."""
    from ..core.config import write_default_config

    project_path = Path(ctx.obj["project"])
    if not project_path.exists():
        _fail(ctx, f"Project path does not exist: {project_path}")
    config_path = write_default_config(project_path, name)
    console.print(f"  [green]OK[/green] Initialized MailQC: {config_path}")


def _parse_assignments(pairs: tuple[str, ...], option: str, as_score: bool = False) -> dict:
    from ..errors import ValidationError

    parsed: dict = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValidationError(f"{option} expects CRITERION=VALUE, got '{pair}'")
        if as_score:
            try:
                parsed[key] = int(value.strip())
            except ValueError:
                raise ValidationError(f"{option} {key}: '{value}' is not a whole number") from None
        else:
            parsed[key] = value
    return parsed


@qc_cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8", errors="replace"))
@click.option("--subject", "-s", type=str, default="", help="Email subject")
@click.option("--agent", "-a", "agent_name", type=str, default="", help="Name of the agent who wrote the email")
@click.option("--save", is_flag=True, help="Save the result as a quality check")
@click.option("--set", "score_pairs", multiple=True, metavar="CRITERION=SCORE", help="Override a criterion score (needs --save)")
@click.option("--feedback", "feedback_pairs", multiple=True, metavar="CRITERION=TEXT", help="Override a criterion's feedback (needs --save)")
@click.option("--general-feedback", type=str, default=None, help="Replace the general feedback (needs --save)")
@click.option("--add-recommendation", "extra_recommendations", multiple=True, help="Append a recommendation (needs --save)")
@click.option("--draft", is_flag=True, help="Save the quality check as a draft (needs --save)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def score(
    ctx: click.Context,
    source,
    subject: str,
    agent_name: str,
    save: bool,
    score_pairs: tuple[str, ...],
    feedback_pairs: tuple[str, ...],
    general_feedback: str,
    extra_recommendations: tuple[str, ...],
    draft: bool,
    as_json: bool,
) -> None:
    """Score an email read from SOURCE (a file, or - for stdin).

    With --save the reviewer can adjust the computed result before it is
    stored; the overall score is recalculated from the adjusted scores.
    """
    from ..core.review import build_pasted_email, review_email
    from ..errors import ValidationError
    from ..models.email import Email
    from ..scoring.orchestrator import calculate_overall_score, score_email_async

    content = source.read()
    adjusting = score_pairs or feedback_pairs or general_feedback or extra_recommendations or draft

    if save:
        config, agents, checks, _ = _repositories(ctx)
        try:
            email = build_pasted_email(content, subject, agent_name)
            check, result = review_email(
                email,
                agents,
                checks,
                config["reviewer"]["id"],
                score_overrides=_parse_assignments(score_pairs, "--set", as_score=True),
                feedback_overrides=_parse_assignments(feedback_pairs, "--feedback"),
                general_feedback=general_feedback,
                extra_recommendations=list(extra_recommendations),
                draft=draft,
            )
        except ValidationError as e:
            _fail(ctx, str(e))
            return
        if not result.success:
            _fail(ctx, "Failed to save the quality check")
            return
        if as_json:
            click.echo(json.dumps(check.to_json_dict(), indent=2))
            return
        label = "draft" if draft else "quality check"
        console.print(f"  [green]OK[/green] Saved {label} {check.id} for {escape(check.agent_name)}")
        console.print(f"Overall: {int(check.overall_score)}/10")
        return

    if adjusting:
        _fail(ctx, "--set, --feedback, --general-feedback, --add-recommendation and --draft need --save")
        return

    _, config = _context(ctx)
    if not content.strip():
        _fail(ctx, "Please provide: content")
        return
    email = Email(id="pasted", subject=subject, body=content, agent_name=agent_name)
    delay = float(config["scoring"].get("grammar_delay_seconds") or 0)
    scoring = asyncio.run(score_email_async(email, grammar_delay_seconds=delay))
    overall = calculate_overall_score(scoring.scores)

    if as_json:
        payload = scoring.to_json_dict()
        payload["overallScore"] = overall
        click.echo(json.dumps(payload, indent=2))
        return
    _print_scoring(scoring, overall)


@qc_cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8", errors="replace"))
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def template(ctx: click.Context, source, as_json: bool) -> None:
    """Check an email read from SOURCE against the known templates."""
    from ..scoring.orchestrator import strip_html
    from ..scoring.templates import analyze_template_consistency, load_template_catalog

    catalog = load_template_catalog(Path(ctx.obj["project"]))
    result = analyze_template_consistency(strip_html(source.read()), catalog)

    if as_json:
        click.echo(json.dumps(result.to_json_dict(), indent=2))
        return

    if result.detected_template is None:
        console.print("[yellow]No known template detected.[/yellow]")
    else:
        style = _score_style(result.score)
        console.print(f"Template: [bold]{result.template_name}[/bold] ({result.detected_template})")
        console.print(f"Score: [{style}]{result.score}/10[/{style}]")
        for name, found in result.component_scores.items():
            mark = "[green]OK[/green]" if found else "[red]MISSING[/red]"
            console.print(f"  {mark} {name.replace('_', ' ')}")
    if result.prohibited_phrases:
        console.print("[red]Prohibited phrases:[/red] " + ", ".join(result.prohibited_phrases))


@qc_cli.group()
def agents() -> None:
    """Manage reviewed agents."""


@agents.command("list")
@click.pass_context
def agents_list(ctx: click.Context) -> None:
    """List all agents."""
    _, agent_repo, _, _ = _repositories(ctx)
    all_agents = agent_repo.get_agents()
    if not all_agents:
        console.print("No agents yet.")
        return
    table = Table(title="Agents")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Department")
    for agent in all_agents:
        table.add_row(escape(agent.id), escape(agent.name), escape(agent.email), escape(agent.department or "-"))
    console.print(table)


@agents.command("add")
@click.argument("name")
@click.option("--department", "-d", type=str, default="", help="Department")
@click.option("--email", "-e", type=str, default=None, help="Email address (default: first.last@example.com)")
@click.pass_context
def agents_add(ctx: click.Context, name: str, department: str, email: str | None) -> None:
    """Add an agent."""
    if not name.strip():
        _fail(ctx, "Please provide: agent name")
        return
    _, agent_repo, _, _ = _repositories(ctx)
    agent = agent_repo.add_agent(name, department=department, email=email)
    console.print(f"  [green]OK[/green] Added {escape(agent.name)} ({escape(agent.id)})")


@agents.command("remove")
@click.argument("agent_id")
@click.pass_context
def agents_remove(ctx: click.Context, agent_id: str) -> None:
    """Remove an agent. Their quality checks are kept."""
    _, agent_repo, _, _ = _repositories(ctx)
    if not agent_repo.remove_agent(agent_id):
        _fail(ctx, f"No agent removed: {agent_id}")
        return
    console.print(f"  [green]OK[/green] Removed {escape(agent_id)}")


@qc_cli.group()
def checks() -> None:
    """Browse saved quality checks."""


@checks.command("list")
@click.option("--agent", "-a", type=str, default=None, help="Agent id or name")
@click.pass_context
def checks_list(ctx: click.Context, agent: str | None) -> None:
    """List saved quality checks, newest first."""
    _, agent_repo, check_repo, _ = _repositories(ctx)
    results = check_repo.get_quality_checks()
    if agent:
        found = agent_repo.get_agent(agent) or agent_repo.find_by_name(agent)
        agent_id = found.id if found else agent
        results = [c for c in results if c.agent_id == agent_id]

    if not results:
        console.print("No quality checks found.")
        return
    table = Table(title="Quality Checks")
    table.add_column("ID")
    table.add_column("Date")
    table.add_column("Agent")
    table.add_column("Subject")
    table.add_column("Overall", justify="right")
    table.add_column("Status")
    for check in results:
        style = _score_style(check.overall_score)
        table.add_row(
            escape(check.id),
            escape(check.date[:10]),
            escape(check.agent_name),
            escape(check.email_subject),
            f"[{style}]{check.overall_score:g}[/{style}]",
            check.status.value,
        )
    console.print(table)


@qc_cli.command()
@click.option("--agent", "-a", type=str, default=None, help="Limit to one agent id")
@click.option("--period", type=click.Choice(["7d", "30d", "90d", "all"]), default="all")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write the report to a file")
@click.pass_context
def report(ctx: click.Context, agent: str | None, period: str, output: str | None) -> None:
    """Generate a markdown performance report."""
    from ..reports.markdown import generate_quality_report
    from ..reports.performance import get_dashboard_summary, get_performance_data

    config, agent_repo, check_repo, _ = _repositories(ctx)
    threshold = float(config["scoring"].get("low_performer_threshold", 7))
    data = get_performance_data(check_repo, agent_repo, agent_id=agent, period=period)
    summary = get_dashboard_summary(
        check_repo, agent_repo, threshold=threshold, agent_id=agent, period=period
    )
    markdown = generate_quality_report(data, summary, period=period)

    if output:
        Path(output).write_text(markdown, encoding="utf-8")
        console.print(f"  [green]OK[/green] Report written to {output}")
    else:
        click.echo(markdown)


@qc_cli.command()
@click.option("--from", "from_date", required=True, help="Start date (ISO 8601)")
@click.option("--to", "to_date", required=True, help="End date (ISO 8601)")
@click.option("--agent-id", type=str, default=None, help="Zammad owner id to filter on")
@click.option("--score/--no-score", default=False, help="Score and save each fetched email")
@click.pass_context
def fetch(ctx: click.Context, from_date: str, to_date: str, agent_id: str | None, score: bool) -> None:
    """Import agent emails from Zammad."""
    from ..clients.zammad import ZammadClient
    from ..core.config import resolve_zammad_settings
    from ..core.review import review_email
    from ..errors import ValidationError, ZammadError

    config, agent_repo, check_repo, settings_repo = _repositories(ctx)
    client = ZammadClient(resolve_zammad_settings(config, settings_repo))
    try:
        emails = asyncio.run(client.fetch_emails(from_date, to_date, agent_id))
    except ZammadError as e:
        _fail(ctx, str(e))
        return

    console.print(f"Fetched {len(emails)} email(s) from Zammad")
    for email in emails:
        line = escape(f"  #{email.ticket_number} {email.subject} ({email.agent_name or 'unassigned'})")
        if not score:
            console.print(line)
            continue
        try:
            check, result = review_email(email, agent_repo, check_repo, config["reviewer"]["id"])
        except ValidationError as e:
            console.print(f"{line} [yellow]SKIPPED[/yellow] {escape(str(e))}")
            continue
        status = "[green]OK[/green]" if result.success else "[red]NOT SAVED[/red]"
        console.print(f"{line} {status} {int(check.overall_score)}/10")


@qc_cli.group()
def settings() -> None:
    """Manage integration settings."""


@settings.command("zammad")
@click.option("--url", type=str, default=None, help="Zammad base URL")
@click.option("--token", type=str, default=None, help="Zammad API token")
@click.option("--test", "test_", is_flag=True, help="Test the connection after saving")
@click.pass_context
def settings_zammad(ctx: click.Context, url: str | None, token: str | None, test_: bool) -> None:
    """Store Zammad connection settings."""
    from ..clients.zammad import ZammadClient
    from ..core.config import resolve_zammad_settings
    from ..errors import ZammadError

    config, _, _, settings_repo = _repositories(ctx)
    stored = settings_repo.get_settings("zammad") or {}
    if url is not None:
        stored["apiUrl"] = url.strip()
    if token is not None:
        stored["apiToken"] = token.strip()

    if url is not None or token is not None:
        if not settings_repo.save_settings("zammad", stored):
            _fail(ctx, "Failed to save Zammad settings")
            return
        console.print("  [green]OK[/green] Zammad settings saved")

    resolved = resolve_zammad_settings(config, settings_repo)
    console.print(f"URL: {resolved.api_url or '-'}")
    console.print(f"Token: {'set' if resolved.api_token else 'not set'}")

    if test_:
        try:
            ok = asyncio.run(ZammadClient(resolved).test_connection())
        except ZammadError as e:
            _fail(ctx, str(e))
            return
        if not ok:
            _fail(ctx, "Could not connect to Zammad")
            return
        console.print("  [green]OK[/green] Connected to Zammad")


def main() -> None:
    """Entry point for the mailqc CLI."""
    qc_cli()


if __name__ == "__main__":
    main()
