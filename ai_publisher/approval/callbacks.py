"""
Decision makers for approval checkpoints.

AutoApprovalCallback: always approves (unattended runs)
ConsoleApprovalCallback: asks a human on the terminal

Design: ApprovalCallback interface allows swapping decision makers without
changing the approval service or the pipeline.
"""

from __future__ import annotations

import logging
import queue
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import Settings, get_settings
from .decision import ApprovalDecision, ApprovalRequest
from .errors import ApprovalTimeoutError

logger = logging.getLogger(__name__)

AUTO_APPROVER = "auto-approve"
NO_STDIN_APPROVER = "auto-approved-no-stdin"
CONSOLE_APPROVER = "console-user"


class ApprovalCallback(ABC):
    """Abstract base class for approval decision makers."""

    @abstractmethod
    def request_approval(self, request: ApprovalRequest) -> ApprovalDecision:
        """Block until a decision is made for ``request``.

        Args:
            request: The checkpoint request

        Returns:
            ApprovalDecision answering the request
        """
        pass


class AutoApprovalCallback(ApprovalCallback):
    """Approves every request. Used for unattended runs and tests."""

    def request_approval(self, request: ApprovalRequest) -> ApprovalDecision:
        logger.info(f"Auto-approving {request.at_state.name}: {request.summary}")
        return ApprovalDecision.approve(request.id, AUTO_APPROVER)


class ConsoleApprovalCallback(ApprovalCallback):
    """Interactive decision maker on the terminal.

    Input:
        A / approve          - continue
        R / reject           - stop the run (prompts for a reason)
        C / changes          - request changes (prompts for feedback)

    End of input approves the request so that piped, non-interactive runs do
    not hang.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        reader: Optional[Callable[[str], str]] = None,
        timeout_seconds: Optional[float] = None,
        approver: str = CONSOLE_APPROVER,
    ):
        """Initialize console decision maker.

        Args:
            console: Rich console to render to (default: stdout)
            reader: Prompt function returning one line of input (default: console.input)
            timeout_seconds: Give up after this long; None waits forever
            approver: Identity recorded on decisions
        """
        self.console = console or Console()
        self.reader = reader or self.console.input
        self.timeout_seconds = timeout_seconds
        self.approver = approver

    def request_approval(self, request: ApprovalRequest) -> ApprovalDecision:
        self._render(request)

        if self.timeout_seconds is None:
            return self._prompt(request)

        # Daemon thread: a prompt still blocked on input after a timeout must
        # not keep the process alive.
        answers: "queue.Queue[tuple]" = queue.Queue(maxsize=1)

        def prompt() -> None:
            try:
                answers.put((self._prompt(request), None))
            except Exception as e:
                answers.put((None, e))

        threading.Thread(
            target=prompt, name=f"approval-{request.id}", daemon=True
        ).start()

        try:
            decision, error = answers.get(timeout=self.timeout_seconds)
        except queue.Empty:
            logger.warning(
                f"Approval at {request.at_state.name} timed out after "
                f"{self.timeout_seconds}s"
            )
            raise ApprovalTimeoutError(request.at_state, self.timeout_seconds)

        if error is not None:
            raise error
        return decision

    def _render(self, request: ApprovalRequest) -> None:
        document = request.document

        table = Table(show_header=False, box=None)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Document", document.title)
        table.add_row("Page", document.page_name)
        table.add_row("State", request.at_state.name)
        table.add_row("Revisions", str(document.revision_count))

        self.console.print(
            Panel.fit(table, title="Approval required", style="bold yellow")
        )
        self.console.print(request.summary)
        self.console.print("[bold]A[/bold]pprove, [bold]R[/bold]eject, request [bold]C[/bold]hanges")

    def _prompt(self, request: ApprovalRequest) -> ApprovalDecision:
        while True:
            try:
                answer = self.reader("Decision [A/R/C]: ").strip().upper()
            except EOFError:
                logger.warning(
                    f"No input available at {request.at_state.name}, approving"
                )
                return ApprovalDecision.approve(request.id, NO_STDIN_APPROVER)

            if answer in ("A", "APPROVE"):
                return ApprovalDecision.approve(request.id, self.approver)
            if answer in ("R", "REJECT"):
                reason = self._read_optional("Reason: ")
                return ApprovalDecision.reject(request.id, self.approver, reason)
            if answer in ("C", "CHANGES"):
                feedback = self._read_optional("Requested changes: ")
                return ApprovalDecision.request_changes(
                    request.id, self.approver, feedback
                )

            self.console.print(f"[red]Unrecognized decision: {answer!r}[/red]")

    def _read_optional(self, prompt: str) -> Optional[str]:
        try:
            text = self.reader(prompt).strip()
        except EOFError:
            return None
        return text or None


def get_approval_callback(settings: Optional[Settings] = None) -> ApprovalCallback:
    """Factory function to get the configured decision maker.

    Args:
        settings: Application settings (default: global settings)

    Returns:
        AutoApprovalCallback when auto-approve is enabled, otherwise a
        ConsoleApprovalCallback using the configured timeout
    """
    settings = settings or get_settings()
    if settings.approval_auto_approve:
        return AutoApprovalCallback()
    return ConsoleApprovalCallback(timeout_seconds=settings.approval_timeout_seconds)
