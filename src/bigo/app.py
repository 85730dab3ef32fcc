"""Interactive CLI application."""
import calendar
import sys
from dataclasses import replace
import time
from datetime import date, datetime
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from bigo.dashboard import (
    build_stat_summary, get_accuracy_trend, get_mastery_scores, get_review_forecast,
    get_due_calendar,
)
from bigo.db import init_db, DEFAULT_DB_PATH
from bigo.errors import BigOError
from bigo.importer import default_backup_name, export_backup, import_backup, is_backup_due
from bigo.mistakes import get_common_pitfalls, get_mistake_journal
from bigo.models import DIFFICULTIES, TOPICS, Problem
from bigo.problems import (
    add_problem, clear_all, delete_problem, filter_problems, get_due_problems,
    list_problems, log_mistake, pick_interleaved, record_review, save_problem,
)
from bigo.review import get_weak_topics
from bigo.seed import seed_demo
from bigo.settings import get_daily_goal
from bigo.status import classify_status, get_status_color

console = Console()

QUALITY_CHOICES = ["0", "1", "2", "3", "4", "5"]
EXIT_WORDS = ("q", "menu")
HEALTH_COLORS = {1: "red", 2: "yellow", 3: "green"}


class SessionExitRequested(Exception):
    """User asked to leave the current review session."""


def setup_logging(level: str = "WARNING") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    answer = Prompt.ask(prompt, choices=choices + list(EXIT_WORDS), show_choices=False)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return int(answer)


def show_welcome():
    console.print(Panel(
        "[bold]BigO[/bold]\n[dim]Spaced repetition for algorithm problems[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("review", "Review problems due today"),
        ("add", "Track a new problem"),
        ("edit", "Update a problem's notes"),
        ("delete", "Remove a problem and its history"),
        ("list", "Browse and search problems"),
        ("dashboard", "Status counts, heatmap, weak topics"),
        ("trend", "Recall quality and speed per day"),
        ("calendar", "Upcoming reviews"),
        ("mistakes", "Mistake journal"),
        ("interleave", "Mixed or single-topic drill"),
        ("export", "Back up to JSON"),
        ("import", "Restore from a backup"),
        ("demo", "Load demo data"),
        ("clear", "Delete everything"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def status_text(problem: Problem, now: datetime | None = None) -> Text:
    status = classify_status(problem.state.next_review_date, now)
    return Text(status.value, style=get_status_color(status))


def run_review_session(db_path: str, problems: list) -> int:
    """Walk through problems, rate each 0-5 and reschedule it. Returns count reviewed."""
    if not problems:
        console.print("[yellow]Nothing due right now![/yellow]")
        return 0
    console.print(f"\n[bold]Review Session[/bold] - {len(problems)} problems [dim](q to stop)[/dim]\n")
    reviewed = 0
    for i, p in enumerate(problems, 1):
        prompt_body = f"[bold]{p.title}[/bold]  [dim]{p.topic} · {p.difficulty}[/dim]"
        if p.trigger:
            prompt_body += f"\n\n[cyan]Signal:[/cyan] {p.trigger}"
        if p.constraints:
            prompt_body += f"\n[cyan]Constraints:[/cyan] {p.constraints}"
        console.print(Panel(prompt_body, title=f"Problem {i}/{len(problems)}", border_style="cyan"))
        started = time.monotonic()
        session_prompt("[dim]Recall the approach, then press Enter to reveal[/dim]", default="")
        solution = f"[green]Pattern:[/green] {p.pattern or '-'}"
        if p.aha:
            solution += f"\n[green]Aha:[/green] {p.aha}"
        if p.mistake:
            solution += f"\n[red]Past mistake:[/red] {p.mistake}"
        console.print(Panel(solution, border_style="green"))
        if p.code_snippet:
            console.print(Syntax(p.code_snippet, "python", theme="ansi_dark"))
        quality = session_int_prompt(
            "Rate recall (0=blank, 3=hard, 4=good, 5=easy)", choices=QUALITY_CHOICES,
        )
        updated = record_review(db_path, p.id, quality, round(time.monotonic() - started))
        reviewed += 1
        console.print(
            f"Next review in [bold]{updated.state.interval}[/bold] day(s) "
            f"({updated.state.next_review_date.date().isoformat()})\n"
        )
    return reviewed


def cmd_review(db_path: str):
    run_review_session(db_path, get_due_problems(db_path))


def cmd_add(db_path: str):
    console.print("\n[bold]New Problem[/bold]")
    title = Prompt.ask("Title").strip()
    if not title:
        console.print("[red]A title is required.[/red]")
        return
    for n, topic in enumerate(TOPICS, 1):
        console.print(f"  [cyan]{n:>2}[/cyan]) {topic}")
    topic_no = Prompt.ask("Topic", choices=[str(n) for n in range(1, len(TOPICS) + 1)], show_choices=False)
    problem = Problem.new(
        title=title,
        topic=TOPICS[int(topic_no) - 1],
        link=Prompt.ask("Link", default=""),
        pattern=Prompt.ask("Pattern", default=""),
        difficulty=Prompt.ask("Difficulty", choices=list(DIFFICULTIES), default="Medium"),
        trigger=Prompt.ask("Signal (what gives the pattern away)", default=""),
        aha=Prompt.ask("Aha (key insight)", default=""),
    )
    add_problem(db_path, problem)
    console.print(
        f"[green]Added {problem.title}.[/green] First review on "
        f"{problem.state.next_review_date.date().isoformat()}"
    )


def pick_problem(problems: list) -> Problem | None:
    """Ask for a title and return the matching problem, if any."""
    title = Prompt.ask("Problem title").strip()
    matches = [p for p in problems if p.title.lower() == title.lower()]
    if not matches:
        console.print(f"[red]No problem titled {title}[/red]")
        return None
    return matches[0]


def cmd_edit(db_path: str):
    problem = pick_problem(list_problems(db_path))
    if problem is None:
        return
    # Notes only; the schedule and review history stay as they are
    edited = replace(
        problem,
        title=Prompt.ask("Title", default=problem.title).strip() or problem.title,
        link=Prompt.ask("Link", default=problem.link),
        pattern=Prompt.ask("Pattern", default=problem.pattern),
        difficulty=Prompt.ask("Difficulty", choices=list(DIFFICULTIES), default=problem.difficulty),
        trigger=Prompt.ask("Signal (what gives the pattern away)", default=problem.trigger),
        aha=Prompt.ask("Aha (key insight)", default=problem.aha),
    )
    save_problem(db_path, edited)
    console.print(f"[green]Updated {edited.title}.[/green]")


def cmd_delete(db_path: str):
    problem = pick_problem(list_problems(db_path))
    if problem is None:
        return
    if Confirm.ask(f"Delete {problem.title} and its review history?", default=False):
        delete_problem(db_path, problem.id)
        console.print(f"[red]Deleted {problem.title}.[/red]")


def render_problem_table(problems: list, title: str = "Problems") -> None:
    now = datetime.now()
    table = Table(title=title)
    table.add_column("Title", style="cyan")
    table.add_column("Topic")
    table.add_column("Pattern")
    table.add_column("Next Review", justify="right")
    table.add_column("Status")
    for p in problems:
        table.add_row(
            p.title, p.topic, p.pattern,
            p.state.next_review_date.date().isoformat(),
            status_text(p, now),
        )
    console.print(table)


def cmd_list(db_path: str):
    search = Prompt.ask("Search (title, pattern, signal)", default="")
    topic = Prompt.ask("Topic", choices=["All"] + TOPICS, default="All", show_choices=False)
    due_only = Confirm.ask("Only due problems?", default=False)
    problems = filter_problems(
        list_problems(db_path),
        search=search,
        topic=None if topic == "All" else topic,
        due_only=due_only,
    )
    if not problems:
        console.print("[yellow]No matching problems.[/yellow]")
        return
    render_problem_table(problems, title=f"Problems ({len(problems)})")


def cmd_dashboard(db_path: str):
    problems = list_problems(db_path)
    stats = build_stat_summary(problems, daily_goal=get_daily_goal(db_path))

    console.print(Panel(
        f"Total [bold]{stats.total}[/bold]  |  "
        f"[red]Critical {stats.critical}[/red]  |  "
        f"[yellow]Fading {stats.fading}[/yellow]  |  "
        f"[green]Mastered {stats.mastered}[/green]\n"
        f"Reviewed today: [bold]{stats.solved_today}[/bold] / {stats.daily_goal}",
        title="BigO Dashboard", border_style="blue",
    ))

    # 14-day activity strip
    cells = Text()
    for day in stats.heatmap:
        color = HEALTH_COLORS[min(3, max(1, round(day.health_score)))]
        cells.append("■ " if day.count else "□ ", style=color if day.count else "dim")
    console.print(Text("  Last 14 days: ") + cells)

    weak = get_weak_topics(problems)
    if weak:
        table = Table(title="Topic Health")
        table.add_column("Topic", style="cyan")
        table.add_column("Health", justify="right")
        table.add_column("Due", justify="right")
        table.add_column("Total", justify="right")
        for t in weak:
            color = "green" if t["health"] >= 80 else "yellow" if t["health"] >= 50 else "red"
            table.add_row(t["topic"], f"[{color}]{t['health']}%[/{color}]", str(t["critical"]), str(t["total"]))
        console.print(table)

    mastery = [m for m in get_mastery_scores(problems) if m["score"]]
    if mastery:
        console.print("\n[bold]Mastery[/bold]")
        for m in mastery:
            bar_filled = m["score"] // 5
            console.print(f"  {m['topic']:<22} {'█' * bar_filled}{'░' * (20 - bar_filled)} {m['score']}")

    render_trend_table(get_accuracy_trend(problems))

    if weak and weak[0]["health"] < 50:
        console.print(f"\n  [yellow]Recommendation: heal {weak[0]['topic']} with 'interleave'[/yellow]")


def render_trend_table(trend: list, title: str = "Recall Trend") -> None:
    if not trend:
        return
    table = Table(title=title)
    table.add_column("Day", style="cyan")
    table.add_column("Avg quality", justify="right")
    table.add_column("Avg time", justify="right")
    for entry in trend:
        q = entry["efficiency"]
        color = "green" if q >= 4 else "yellow" if q >= 3 else "red"
        table.add_row(
            entry["day"].strftime("%a %d %b"),
            f"[{color}]{q:.2f}[/{color}]",
            f"{entry['speed']}s" if entry["speed"] else "-",
        )
    console.print(table)


def cmd_trend(db_path: str):
    topic = Prompt.ask("Topic", choices=["All"] + TOPICS, default="All", show_choices=False)
    trend = get_accuracy_trend(list_problems(db_path), topic=None if topic == "All" else topic)
    if not trend:
        console.print("[yellow]No reviews logged for this topic yet.[/yellow]")
        return
    render_trend_table(trend, title=f"Recall Trend ({topic})")


def cmd_calendar(db_path: str):
    problems = list_problems(db_path)
    forecast = get_review_forecast(problems)
    table = Table(title="Next 7 Days")
    for entry in forecast:
        table.add_column(entry["day"].strftime("%a %d"), justify="center")
    table.add_row(*[str(entry["count"]) for entry in forecast])
    console.print(table)

    today = date.today()
    by_day = get_due_calendar(problems, today.year, today.month)
    month = Table(title=today.strftime("%B %Y"))
    for name in calendar.day_abbr:
        month.add_column(name, justify="right")
    for week in calendar.monthcalendar(today.year, today.month):
        cells = []
        for day in week:
            if day == 0:
                cells.append("")
            elif day in by_day:
                cells.append(f"[bold cyan]{day}[/bold cyan] ({len(by_day[day])})")
            else:
                cells.append(f"[dim]{day}[/dim]")
        month.add_row(*cells)
    console.print(month)


def cmd_mistakes(db_path: str):
    problems = list_problems(db_path)
    journal = get_mistake_journal(problems)
    if not journal:
        console.print("[green]No mistakes logged yet.[/green]")
        return
    for topic, items in journal.items():
        console.print(f"\n[bold]{topic}[/bold]")
        for p in items:
            console.print(f"  [red]•[/red] {p.title}: {p.mistake}")
    pitfalls = get_common_pitfalls(problems)
    if pitfalls:
        console.print("\n[bold]Recurring pitfalls:[/bold] " + ", ".join(f"{w} ({c})" for w, c in pitfalls))
    if Confirm.ask("\nLog a new mistake?", default=False):
        render_problem_table(problems)
        problem = pick_problem(problems)
        if problem is None:
            return
        log_mistake(db_path, problem.id, Prompt.ask("What went wrong?"))
        console.print("[green]Mistake logged.[/green]")


def cmd_interleave(db_path: str):
    problems = list_problems(db_path)
    topic = Prompt.ask("Topic to heal", choices=["All"] + TOPICS, default="All", show_choices=False)
    selected = pick_interleaved(problems, topic=None if topic == "All" else topic)
    if not selected:
        console.print("[yellow]No problems found for this topic.[/yellow]")
        return
    run_review_session(db_path, selected)


def cmd_export(db_path: str):
    file_path = Prompt.ask("Backup file", default=default_backup_name())
    result = export_backup(db_path, file_path)
    console.print(f"[green]Saved {result['count']} problems to {result['filename']}[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("Backup file (.json, .yaml)")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    replace = Confirm.ask("Replace existing problems?", default=False)
    result = import_backup(db_path, file_path, replace=replace)
    msg = f"[green]Imported {result['imported']} problems from {result['filename']}[/green]"
    if result["skipped"]:
        msg += f" [yellow]({result['skipped']} skipped)[/yellow]"
    console.print(msg)


def cmd_demo(db_path: str):
    if Confirm.ask("This replaces your current list with demo data. Continue?", default=False):
        count = seed_demo(db_path)
        console.print(f"[green]Loaded {count} demo problems.[/green]")


def cmd_clear(db_path: str):
    if Prompt.ask("Type DELETE to wipe all data") == "DELETE":
        clear_all(db_path)
        console.print("[red]All data has been wiped.[/red]")


def main():
    setup_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    show_welcome()
    if is_backup_due(db_path):
        console.print("[yellow]It's been over 7 days since your last backup. Use 'export'.[/yellow]")

    commands = {
        "review": cmd_review,
        "add": cmd_add,
        "edit": cmd_edit,
        "delete": cmd_delete,
        "list": cmd_list,
        "dashboard": cmd_dashboard,
        "trend": cmd_trend,
        "calendar": cmd_calendar,
        "mistakes": cmd_mistakes,
        "interleave": cmd_interleave,
        "export": cmd_export,
        "import": cmd_import,
        "demo": cmd_demo,
        "clear": cmd_clear,
    }
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="review").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Keep the streak going![/dim]")
            break
        command = commands.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(db_path)
        except SessionExitRequested:
            console.print("[dim]Session paused.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except (BigOError, OSError) as e:
            logger.error(f"{choice} failed: {e}")
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
