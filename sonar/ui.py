from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn, MofNCompleteColumn

console = Console()


class SweepProgress:
    """
    Progress bar driven by the sequential scheduler's callbacks.
    update() is called before each probe, complete() once at the end.
    """

    def __init__(self, progress: Progress):
        self.progress = progress
        self.task_id = None
        self.total = 0

    def update(self, index: int, total: int, target: str):
        if self.task_id is None:
            self.task_id = self.progress.add_task("[cyan]Pinging...", total=total)
            self.total = total
        # index is 1-based and reported before the probe runs
        self.progress.update(self.task_id, completed=index - 1,
                             description=f"[cyan]Pinging {target}")

    def complete(self):
        if self.task_id is not None:
            self.progress.update(self.task_id, completed=self.total, description="[green]Sweep complete")


class ScannerUI:
    def __init__(self):
        self.console = console

    def display_welcome(self):
        self.console.rule("[bold red]SONAR - IPv4 Ping Sweep[/bold red]")

    def display_start(self, label, target_count, mode):
        self.console.print(Panel.fit(
            f"[bold green]Sweeping {label}[/bold green] ({target_count} targets, {mode})",
            border_style="blue"))

    def create_progress(self):
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=False
        )

    def build_table(self, result, title):
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("IP", style="cyan")
        table.add_column("Status")
        table.add_column("Latency (ms)", justify="right", style="yellow")

        for outcome in result:
            status = "[green]Up[/green]" if outcome.reachable else "[red]Down[/red]"
            latency = "" if outcome.latency_ms is None else str(outcome.latency_ms)
            table.add_row(outcome.ip, status, latency)
        return table

    def display_results(self, label, result):
        """
        Displays the sweep result as a Rich table followed by summary stats.
        """
        self.console.print("\n")
        if len(result):
            self.console.print(self.build_table(result, f"Ping Sweep Results for {label}"))
        else:
            self.console.print("[yellow]No hosts to display.[/yellow]")

        self.console.print(f"\n[bold]Sweep completed in {result.duration_seconds:.2f} seconds.[/bold]")
        self.console.print(f"[bold]Hosts up: {result.reachable_count}[/bold]")
        if result.unreachable_count:
            self.console.print(f"[dim]Hosts down: {result.unreachable_count}[/dim]")
        if result.cancelled:
            skipped = result.total_targets - result.probed_count
            self.console.print(f"[yellow]Sweep cancelled: {skipped} targets never probed.[/yellow]")

    def show_message(self, msg, style="bold red"):
        self.console.print(f"[{style}]{msg}[/{style}]")

    def show_saved(self, filename):
        self.console.print(f"[dim]Results saved to {filename}[/dim]")
