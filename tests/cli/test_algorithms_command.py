import json

from click.testing import CliRunner
from streamdigest.cli.main import build_cli


def test_algorithms():
    """
    GIVEN the streamdigest CLI
    WHEN the algorithms command is called
    THEN it should list every built-in algorithm with its digest size
    """
    runner = CliRunner()
    cli = build_cli()
    result = runner.invoke(cli, ["--log-level", "ERROR", "algorithms"])

    assert result.exit_code == 0, result.output
    rows = dict(line.split() for line in result.stdout.splitlines())
    assert rows == {"md5": "16", "sha1": "20", "sha224": "28", "sha256": "32", "sha384": "48", "sha512": "64"}


def test_algorithms_json():
    """
    GIVEN the streamdigest CLI
    WHEN the algorithms command is called with --json
    THEN it should print a mapping of algorithm name to digest size
    """
    runner = CliRunner()
    cli = build_cli()
    result = runner.invoke(cli, ["--log-level", "ERROR", "algorithms", "--json"])

    assert result.exit_code == 0, result.output
    sizes = json.loads(result.stdout)
    assert sizes["sha256"] == 32
    assert list(sizes) == sorted(sizes)


def test_version():
    runner = CliRunner()
    cli = build_cli()
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.startswith("streamdigest v")
    assert "sha256" in result.stdout
