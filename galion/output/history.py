# Galion Sync History
# Markdown log of finished sync jobs

from datetime import datetime
from pathlib import Path

from galion.jobs.model import Done, JobsList, SyncJobIdentity

HEADER = "# Galion Sync History\n\n"


def format_entry(identity: SyncJobIdentity, state: Done, when: datetime | None = None) -> str:
    """Markdown line for one finished job."""
    when = when or datetime.now()
    outcome = "✓" if state.status.success else "✗"
    line = (
        f"- {when:%Y-%m-%d %H:%M:%S} {outcome} **{identity.name}** "
        f"`{identity.source}` → `{identity.destination}` "
        f"(job {identity.job_id}, {state.status.duration_seconds:.1f}s)"
    )
    if state.status.error:
        line += f" - {state.status.error}"
    return line + "\n"


class SyncHistory:
    """
    Appends finished jobs to a markdown file, newest first.

    Each job is recorded once, the first time a snapshot shows it done.
    """

    def __init__(self, path: Path):
        self.path = path
        self._recorded: set[SyncJobIdentity] = set()

    def record(self, jobs: JobsList) -> int:
        """
        Record the jobs of a snapshot that finished since the last call.

        Returns:
            Number of entries written.
        """
        entries = []
        for identity, state in jobs.items():
            if isinstance(state, Done) and identity not in self._recorded:
                self._recorded.add(identity)
                entries.append(format_entry(identity, state))
        if entries:
            self._write("".join(entries))
        return len(entries)

    def _write(self, entry: str) -> None:
        if self.path.exists():
            existing = self.path.read_text(encoding="utf-8")
            # Insert after header
            if existing.startswith("# "):
                blank_line = existing.find("\n\n")
                if blank_line == -1:
                    # Heading without a blank line after it
                    heading, _, rest = existing.partition("\n")
                    new_content = f"{heading}\n\n{entry}{rest}"
                else:
                    header_end = blank_line + 2
                    new_content = existing[:header_end] + entry + existing[header_end:]
            else:
                new_content = entry + existing
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            new_content = HEADER + entry

        self.path.write_text(new_content, encoding="utf-8")
