import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from navkit.cli import main
from navkit.core import SiteInfo


def _mock_client(MockClient, **methods):
    client = MagicMock()
    for name, value in methods.items():
        setattr(client, name, AsyncMock(return_value=value))
    MockClient.return_value.__aenter__.return_value = client
    return client


def test_fetch_prints_site_info(capsys):
    with patch("navkit.cli.SiteInfoClient") as MockClient:
        client = _mock_client(
            MockClient,
            fetch_site_info=SiteInfo(
                title="Example", description="Desc", icon="/uploads/icons/x.png"
            ),
        )

        with pytest.raises(SystemExit) as cm:
            main(["fetch", "https://example.com/"])

    assert cm.value.code == 0
    client.fetch_site_info.assert_awaited_once_with("https://example.com/")
    assert json.loads(capsys.readouterr().out) == {
        "title": "Example",
        "description": "Desc",
        "icon": "/uploads/icons/x.png",
    }


def test_fetch_failure_exits_1(capsys):
    """A site that cannot be scraped should point the user to manual entry."""
    with patch("navkit.cli.SiteInfoClient") as MockClient:
        _mock_client(MockClient, fetch_site_info=None)

        with pytest.raises(SystemExit) as cm:
            main(["fetch", "https://unreachable.example.com/"])

    assert cm.value.code == 1
    assert "manually" in capsys.readouterr().err


def test_download_icon(capsys):
    with patch("navkit.cli.SiteInfoClient") as MockClient:
        _mock_client(MockClient, download_icon="/uploads/icons/icon_1_abcdef01.png")

        with pytest.raises(SystemExit) as cm:
            main(["download-icon", "https://cdn.example.com/logo.png"])

    assert cm.value.code == 0
    assert json.loads(capsys.readouterr().out)["local_url"] == "/uploads/icons/icon_1_abcdef01.png"


def test_upload_root_flag(tmp_path):
    with patch("navkit.cli.SiteInfoClient") as MockClient:
        _mock_client(MockClient, download_icon=None)

        with pytest.raises(SystemExit) as cm:
            main(["--upload-root", str(tmp_path), "download-icon", "https://cdn.example.com/x.png"])

    assert cm.value.code == 1
    store = MockClient.call_args.kwargs["store"]
    assert store.root == tmp_path


def test_check_image(tmp_path, capsys, png_bytes):
    path = tmp_path / "logo.png"
    path.write_bytes(png_bytes)

    with pytest.raises(SystemExit) as cm:
        main(["check-image", str(path)])

    assert cm.value.code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["format"] == "png"
    assert report["size"] == len(png_bytes)


def test_check_image_rejects_non_image(tmp_path):
    path = tmp_path / "page.png"
    path.write_bytes(b"<html></html>")

    with pytest.raises(SystemExit) as cm:
        main(["check-image", str(path)])

    assert cm.value.code == 1


def test_check_image_missing_file(tmp_path):
    with pytest.raises(SystemExit) as cm:
        main(["check-image", str(tmp_path / "nope.png")])

    assert cm.value.code == 1


def test_command_required():
    with pytest.raises(SystemExit) as cm:
        main([])

    assert cm.value.code == 2
