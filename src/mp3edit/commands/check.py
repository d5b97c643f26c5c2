"""Report whether the libraries mp3edit relies on are installed."""

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version

from mp3edit.utils.console import console

REQUIRED_PACKAGES = ("mutagen", "typer", "rich")


@dataclass(frozen=True)
class CheckResult:
    package: str
    version: str | None

    @property
    def ok(self) -> bool:
        return self.version is not None


def check_dependencies(packages=REQUIRED_PACKAGES) -> list[CheckResult]:
    results = []
    for package in packages:
        try:
            results.append(CheckResult(package, version(package)))
        except PackageNotFoundError:
            results.append(CheckResult(package, None))
    return results


def run(packages=REQUIRED_PACKAGES) -> int:
    """Print one line per dependency. Returns the exit status."""
    results = check_dependencies(packages)
    for result in results:
        if result.ok:
            console.print(f"  [success]✓[/success] {result.package} {result.version}")
        else:
            console.print(f"  [error]✗ {result.package} is not installed[/error]")
    return 0 if all(result.ok for result in results) else 1
