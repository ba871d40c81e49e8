from pathlib import Path

from invoke import Context, task


class Paths:
    repo_root = Path(__file__).parent
    examples = repo_root / "examples"


def from_repo_root(c: Context):
    return c.cd(Paths.repo_root)


@task
def compile_requirements(c: Context, install=True, upgrade=False):
    with from_repo_root(c):
        upgrade_flag = "--upgrade" if upgrade else ""
        c.run(f"pip-compile {upgrade_flag} -v --strip-extras --extra dev --extra build pyproject.toml", pty=True)
        c.run('echo "-e ." >> requirements.txt')
        if install:
            c.run("pip-sync", pty=True)


@task
def bumpver(c: Context, part="patch", dry=False):
    """Bump the package version; ``part`` is one of major, minor or patch."""
    if part not in ("major", "minor", "patch"):
        raise SystemExit(f"Unknown version part {part!r}; use major, minor or patch")
    with from_repo_root(c):
        c.run(f"bumpver update --{part} {'--dry' if dry else ''}", pty=True)


@task
def build(c: Context, clean=True):
    with from_repo_root(c):
        if clean:
            c.run("rm -rf dist/*")
        c.run("python -m build")
        c.run("twine check dist/*")


@task
def publish(c: Context, testpypi=True):
    testpypi_flag = "-r testpypi" if testpypi else ""
    with from_repo_root(c):
        c.run(f"twine upload {testpypi_flag} dist/*", pty=True)


@task
def lint(c: Context):
    with from_repo_root(c):
        c.run("black src/ tests/ examples/ tasks.py")
        c.run("isort src/ tests/ examples/ tasks.py")
        c.run("ruff check src/ tests/ examples/ tasks.py --fix")


@task
def test(c: Context, verbose=False):
    with from_repo_root(c):
        c.run(f"pytest {'-v' if verbose else ''} tests/", pty=True)


@task
def run_example(c: Context, name="job_lists_example"):
    """Run one of the scripts under examples/."""
    with from_repo_root(c):
        c.run(f"python {Paths.examples / name}.py", pty=True)
