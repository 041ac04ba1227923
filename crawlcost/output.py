"""crawlcost - Report output"""

from typing import Dict

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .costs import format_bytes, format_currency

SEVERITY_COLORS = {'critical': 'red bold', 'high': 'red', 'medium': 'yellow', 'low': 'blue'}
ACTION_COLORS = {'block': 'red', 'rate_limit': 'yellow', 'allow': 'green'}


def print_report(report: Dict, console: Console):
    console.print("\n" + "═" * 70, style="cyan")
    console.print("              BOT TRAFFIC COST REPORT", style="bold cyan")
    console.print("═" * 70, style="cyan")

    summary = report['summary']
    console.print(Panel.fit(
        f"Lines Submitted: [cyan]{summary['lines_submitted']:,}[/]\n"
        f"Entries Recognized: [cyan]{summary['total_entries']:,}[/]\n"
        f"Bot Requests: [{'red' if summary['bot_requests'] > 0 else 'green'}]"
        f"{summary['bot_requests']:,}[/] ({summary['bot_percentage']}%)\n"
        f"Human Requests: [green]{summary['human_requests']:,}[/]\n"
        f"Bot Bandwidth: [cyan]{format_bytes(summary['bot_bytes'])}[/] "
        f"of {format_bytes(summary['total_bytes'])}",
        title="Summary",
        border_style="cyan"
    ))

    detection = report['detection']
    if detection['by_severity']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("BOTS BY SEVERITY", style="bold")
        for severity, count in sorted(detection['by_severity'].items()):
            color = SEVERITY_COLORS.get(severity, 'white')
            console.print(f"  {severity.upper()}: [{color}]{count}[/]")

    if report['categories']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("BOTS BY CATEGORY", style="bold")
        table = Table(box=box.ROUNDED)
        table.add_column("Category", style="cyan")
        table.add_column("Requests", style="white")
        table.add_column("Bandwidth", style="yellow")
        table.add_column("Bots")
        for category, data in report['categories'].items():
            table.add_row(category.replace('_', ' ').title(), str(data['requests']),
                          format_bytes(data['bandwidth']), ', '.join(data['bots']))
        console.print(table)

    if report['bots']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("TOP BOTS (by bandwidth)", style="bold")
        table = Table(box=box.ROUNDED)
        table.add_column("Bot", style="red")
        table.add_column("Category", style="cyan")
        table.add_column("Requests", style="white")
        table.add_column("Bandwidth", style="yellow")
        for bot in report['bots'][:10]:
            table.add_row(bot['bot_name'], bot['category'] or '-', str(bot['request_count']),
                          format_bytes(bot['bytes_transferred']))
        console.print(table)

    costs = report['costs']
    bot_cost = costs['bot_traffic']
    savings = costs['weighted_savings']
    roi = costs['roi']
    console.print("\n" + "─" * 70, style="cyan")
    console.print(Panel.fit(
        f"Provider: [cyan]{costs['provider_name']}[/]\n"
        f"Bot Bandwidth Cost: [yellow]{format_currency(bot_cost['total'])}[/] "
        f"({format_currency(bot_cost['monthly'])}/month, {format_currency(bot_cost['yearly'])}/year)\n"
        f"Weighted Savings: [green]{format_currency(savings['monthly'])}[/]/month\n"
        f"Break-even: {_break_even(roi['break_even_days'])}\n"
        f"ROI: {_roi(roi['roi'])}",
        title="Costs",
        border_style="yellow"
    ))

    if report['recommendations']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("RECOMMENDATIONS", style="bold")
        table = Table(box=box.ROUNDED)
        table.add_column("Action")
        table.add_column("Bot", style="cyan")
        table.add_column("Savings/month", style="green")
        table.add_column("Confidence")
        table.add_column("Reason")
        for rec in report['recommendations']:
            color = ACTION_COLORS.get(rec['action'], 'white')
            table.add_row(f"[{color}]{rec['action'].upper()}[/]", rec['target'],
                          format_currency(rec['savings_per_month']),
                          f"{rec['confidence']:.0%}", rec['reason'])
        console.print(table)

    console.print("\n" + "═" * 70, style="cyan")


def _break_even(days) -> str:
    if days is None:
        return "never"
    if days == 0:
        return "immediate"
    return f"{days} day(s)"


def _roi(value: float) -> str:
    if value == float('inf'):
        return "unbounded (no implementation cost)"
    return f"{value:,.1f}%"
