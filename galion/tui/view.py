# Galion UI View
# Rich renderables for the remotes table, the jobs panel and modal popups

from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from galion.jobs.model import Done, JobsList, JobState, Pending, Sent
from galion.remotes.store import RemoteStore
from galion.tui.edit import EditBuffer, EditField
from galion.tui.state import ConfirmDelete, EditString, ErrorMode, InteractionStateMachine

HELP_NORMAL = "j/k move  s sync  e edit  c duplicate  d delete  q quit"
HELP_EDIT = "tab next field  enter save  esc cancel"


def remotes_table(store: RemoteStore, selected: int) -> Table:
    """Table of remotes with the selected row highlighted."""
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("name", style="cyan")
    table.add_column("src")
    table.add_column("dest")

    for index, remote in enumerate(store):
        row = remote.to_table_row()
        if remote.is_discovered:
            row[0] = f"{row[0]} [dim](rclone)[/dim]"
        style = "reverse blue" if index == selected else ("" if index % 2 == 0 else "dim")
        table.add_row(*row, style=style)
    return table


def _state_cell(state: JobState) -> Text:
    if isinstance(state, Done):
        if state.status.success:
            return Text("✓ done", style="green")
        return Text("✗ failed", style="red")
    if isinstance(state, Pending):
        return Text("… running", style="yellow")
    if isinstance(state, Sent):
        return Text("→ sent", style="blue")
    return Text("?")


def jobs_table(jobs: JobsList) -> Table:
    """Table of the latest jobs snapshot."""
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("id", justify="right")
    table.add_column("name", style="cyan")
    table.add_column("state")
    table.add_column("duration", justify="right")
    table.add_column("error", style="red")

    for identity, state in jobs.items():
        status = getattr(state, "status", None)
        duration = f"{status.duration_seconds:.1f}s" if status else ""
        error = status.error if status else ""
        table.add_row(str(identity.job_id), identity.name, _state_cell(state), duration, error)
    return table


def edit_panel(buffer: EditBuffer) -> Panel:
    """The three edit fields, the cursor drawn in the active one."""
    lines = []
    for edit_field in EditField:
        value = getattr(buffer, edit_field.value)
        line = Text(f"{edit_field.value:>12}: ", style="bold")
        if edit_field == buffer.active_field:
            line.append(value[: buffer.cursor])
            cursor_char = value[buffer.cursor : buffer.cursor + 1] or " "
            line.append(cursor_char, style="reverse")
            line.append(value[buffer.cursor + 1 :])
        else:
            line.append(value, style="dim")
        lines.append(line)
    lines.append(Text(HELP_EDIT, style="dim"))
    return Panel(Group(*lines), title="Edit remote", border_style="cyan")


def modal(machine: InteractionStateMachine) -> RenderableType | None:
    """Popup of the current mode, None in Normal mode."""
    mode = machine.mode
    if isinstance(mode, ErrorMode):
        return Panel(Text(mode.message), title="Error", subtitle="enter to dismiss", border_style="red")
    if isinstance(mode, ConfirmDelete):
        remote = machine.store.get(mode.index)
        name = remote.remote_name if remote else "?"
        return Panel(Text(f"Delete remote {name}? [y/n]"), title="Confirm", border_style="yellow")
    if isinstance(mode, EditString):
        return edit_panel(mode.buffer)
    return None


def render(machine: InteractionStateMachine, jobs: JobsList) -> RenderableType:
    """Whole screen: remotes left, jobs right, popup and help at the bottom."""
    layout = Layout()
    body = Layout(name="body", ratio=1)
    body.split_row(
        Layout(Panel(remotes_table(machine.store, machine.selected), title="Remotes"), name="remotes"),
        Layout(Panel(jobs_table(jobs), title="Jobs"), name="jobs"),
    )

    popup = modal(machine)
    parts = [body]
    if popup is not None:
        parts.append(Layout(popup, name="popup", size=7))
    parts.append(Layout(Text(HELP_NORMAL, style="dim"), name="help", size=1))
    layout.split_column(*parts)
    return layout
