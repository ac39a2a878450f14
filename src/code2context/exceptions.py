from dataclasses import dataclass


@dataclass(frozen=True)
class Code2ContextError(Exception):
    """Base exception for errors in the code2context module."""

    def __str__(self) -> str:
        return getattr(self, "message", "") or (self.__doc__ or "").strip()


@dataclass(frozen=True)
class RootPathNotFoundError(Code2ContextError):
    """Raised when the project root handed to the engine does not exist."""

    root_path: str

    def __str__(self) -> str:
        return f"Root path does not exist: {self.root_path}"


@dataclass(frozen=True)
class NoFilesToProcessError(Code2ContextError):
    """Raised when no file survives selection and ignore filtering."""

    message: str = "No files to process with the current selection and ignore rules."


@dataclass(frozen=True)
class OutputWriteError(Code2ContextError):
    """Raised when the compaction document cannot be persisted."""

    output_path: str

    def __str__(self) -> str:
        return f"Could not write output to {self.output_path}"


@dataclass(frozen=True)
class GitCommandError(Code2ContextError):
    """Raised when a git command fails."""

    command: str
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        detail = self.stderr.strip() or self.stdout.strip()
        return f"`{self.command}` exited with {self.returncode}: {detail}"
