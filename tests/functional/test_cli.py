import pytest
from unittest.mock import patch

from papersmith.main import main
from papersmith.pdf_utils import ImageStitchRenderer, PdfBytesRenderer


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("PAPERSMITH_GLOB_PATTERN", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with patch("papersmith.main.load_dotenv"):
        yield


@pytest.fixture
def inbox(tmp_path):
    (tmp_path / "scan_002.pdf").write_bytes(b"%PDF")
    (tmp_path / "scan_001.pdf").write_bytes(b"%PDF")
    (tmp_path / "20200101-old-receipt.pdf").write_bytes(b"%PDF")
    return tmp_path


def test_cli_help(capsys):
    with pytest.raises(SystemExit) as e:
        main(["--help"])

    assert e.value.code == 0
    captured = capsys.readouterr()
    assert "Classify and rename PDFs using a vision-language model" in captured.out


def test_cli_missing_glob_pattern(capsys):
    with pytest.raises(SystemExit) as e:
        main([])

    assert e.value.code == 2
    assert "PAPERSMITH_GLOB_PATTERN" in capsys.readouterr().out


def test_cli_missing_api_key(monkeypatch, inbox):
    monkeypatch.delenv("OPENAI_API_KEY")

    with pytest.raises(SystemExit) as e:
        main(["-g", str(inbox / "*.pdf")])

    assert e.value.code == 2
    assert (inbox / "scan_001.pdf").exists()


@patch("papersmith.main.PDFRenamer")
def test_cli_dry_run(mock_renamer_class, inbox):
    mock_renamer = mock_renamer_class.return_value
    mock_renamer.stats.failed = 0

    with pytest.raises(SystemExit) as e:
        main(["-g", str(inbox / "*.pdf"), "--dry-run"])

    assert e.value.code == 0
    _, kwargs = mock_renamer_class.call_args
    assert kwargs["dry_run"] is True
    assert isinstance(kwargs["renderer"], ImageStitchRenderer)

    (candidates,), _ = mock_renamer.batch_process.call_args
    assert [c.name for c in candidates] == ["scan_001.pdf", "scan_002.pdf"]
    assert mock_renamer.stats.skipped == 1
    mock_renamer.close.assert_called_once()


@patch("papersmith.main.PDFRenamer")
def test_cli_glob_pattern_from_environment(mock_renamer_class, monkeypatch, inbox):
    monkeypatch.setenv("PAPERSMITH_GLOB_PATTERN", str(inbox / "scan_002.pdf"))
    mock_renamer = mock_renamer_class.return_value
    mock_renamer.stats.failed = 0

    with pytest.raises(SystemExit) as e:
        main([])

    assert e.value.code == 0
    (candidates,), _ = mock_renamer.batch_process.call_args
    assert [c.name for c in candidates] == ["scan_002.pdf"]


@patch("papersmith.main.create_client")
@patch("papersmith.main.PDFRenamer")
def test_cli_pdf_transport(mock_renamer_class, mock_create_client, inbox):
    mock_renamer = mock_renamer_class.return_value
    mock_renamer.stats.failed = 0

    with pytest.raises(SystemExit):
        main(["-g", str(inbox / "*.pdf"), "-t", "pdf", "-m", "gpt-4.1"])

    mock_create_client.assert_called_once_with("pdf", "sk-test", "https://api.openai.com/v1")
    _, kwargs = mock_renamer_class.call_args
    assert isinstance(kwargs["renderer"], PdfBytesRenderer)
    assert kwargs["prompt_builder"].model == "gpt-4.1"
    assert kwargs["dry_run"] is False


@patch("papersmith.main.PDFRenamer")
def test_cli_exit_code_reflects_failures(mock_renamer_class, inbox):
    mock_renamer = mock_renamer_class.return_value
    mock_renamer.stats.failed = 1

    with pytest.raises(SystemExit) as e:
        main(["-g", str(inbox / "*.pdf")])

    assert e.value.code == 1
