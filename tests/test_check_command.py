"""Tests for the dependency check behind --check."""

from mp3edit.commands.check import REQUIRED_PACKAGES, check_dependencies, run


def test_required_packages_installed():
    results = check_dependencies()

    assert [r.package for r in results] == list(REQUIRED_PACKAGES)
    assert all(r.ok for r in results)


def test_missing_package(capsys):
    status = run(("mutagen", "mp3edit-no-such-package"))

    out = capsys.readouterr().out
    assert status == 1
    assert "mutagen" in out
    assert "mp3edit-no-such-package is not installed" in out


def test_all_present(capsys):
    assert run(("mutagen",)) == 0
