import hashlib

from click.testing import CliRunner
from streamdigest.cli.main import build_cli


def test_copy(reference_file, reference_buffer, tmp_path, caplog):
    """
    GIVEN a source file
    WHEN the copy command is called
    THEN the target should hold the same bytes and the digest of those bytes should be printed
    """
    target = tmp_path / "copy" / "target.jpg"
    target.parent.mkdir()

    runner = CliRunner()
    cli = build_cli()
    result = runner.invoke(cli, ["copy", "--chunk-size", "4096", str(reference_file), str(target)])

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == reference_buffer
    assert result.stdout.strip() == f"{hashlib.sha256(reference_buffer).hexdigest()}  {target.resolve()}"
    assert f"Copied {len(reference_buffer)} bytes" in caplog.text
    assert not target.with_name(target.name + ".part").exists()


def test_copy_with_progress_and_algorithm(reference_file, reference_buffer, tmp_path):
    """
    GIVEN a source file
    WHEN the copy command is called with --progress and a different algorithm
    THEN the copy should still succeed with the requested digest
    """
    target = tmp_path / "target.bin"

    runner = CliRunner()
    cli = build_cli()
    result = runner.invoke(
        cli,
        ["--log-level", "ERROR", "copy", "--progress", "-a", "sha384", "-e", "base64", str(reference_file), str(target)],
    )

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == reference_buffer
    assert "  " in result.stdout


def test_copy_same_file(reference_file):
    """
    GIVEN a source file
    WHEN the copy command is called with the same path as target
    THEN it should fail with a usage error and leave the file alone
    """
    content = reference_file.read_bytes()

    runner = CliRunner()
    cli = build_cli()
    result = runner.invoke(cli, ["copy", str(reference_file), str(reference_file)])

    assert result.exit_code == 2
    assert "must be different" in result.stderr
    assert reference_file.read_bytes() == content


def test_copy_unwritable_target(reference_file, tmp_path, caplog):
    """
    GIVEN a target inside a directory that does not exist
    WHEN the copy command is called
    THEN it should fail and not leave a target behind
    """
    target = tmp_path / "missing-dir" / "target.bin"

    runner = CliRunner()
    cli = build_cli()
    result = runner.invoke(cli, ["copy", str(reference_file), str(target)])

    assert result.exit_code == 1
    assert "failed" in caplog.text
    assert not target.exists()
