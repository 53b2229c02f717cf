"""Tests for bethyw.input module."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from bethyw.errors import InputOpenError
from bethyw.input import (
    URL_CACHE_DIR_NAME,
    InputFile,
    InputUrl,
    get_cache_path,
    get_url_filename,
    is_url,
    join_location,
    open_source,
)


class TestLocations:
    """Tests for URL detection and joining."""

    def test_is_url(self) -> None:
        """Test that only HTTP and HTTPS locations are URLs."""
        assert is_url("https://statswales.gov.wales/data.json") is True
        assert is_url("http://localhost:8080/areas.csv") is True
        assert is_url("datasets/areas.csv") is False
        assert is_url("ftp://example.com/file") is False

    def test_join_directory(self) -> None:
        """Test joining a local directory and a file name."""
        assert join_location("datasets", "areas.csv") == str(Path("datasets") / "areas.csv")

    def test_join_url(self) -> None:
        """Test joining a base URL and a file name."""
        assert join_location("https://example.com/data/", "areas.csv") == (
            "https://example.com/data/areas.csv"
        )

    def test_get_url_filename(self) -> None:
        """Test extracting the file name from a URL."""
        assert get_url_filename("https://example.com/path/popu1009.json") == "popu1009.json"
        assert get_url_filename("https://example.com/") == "download"

    def test_cache_path_is_deterministic(self, tmp_path: Path) -> None:
        """Test that each URL maps to one stable cache file."""
        url = "https://example.com/areas.csv"
        assert get_cache_path(url, tmp_path) == get_cache_path(url, tmp_path)
        assert get_cache_path(url, tmp_path).name.endswith("_areas.csv")
        assert get_cache_path(url, tmp_path) != get_cache_path(url + "?v=2", tmp_path)

    def test_open_source_picks_type(self, tmp_path: Path) -> None:
        """Test that locations pick a file or URL source."""
        assert isinstance(open_source("datasets/areas.csv"), InputFile)
        source = open_source("https://example.com/areas.csv", tmp_path)
        assert isinstance(source, InputUrl)
        assert source.cache_dir == tmp_path

    def test_open_source_default_cache_dir(self) -> None:
        """Test the default download cache directory."""
        source = open_source("https://example.com/areas.csv")
        assert isinstance(source, InputUrl)
        assert source.cache_dir == Path(URL_CACHE_DIR_NAME)


class TestInputFile:
    """Tests for local files."""

    def test_open_reads_text(self, tmp_path: Path) -> None:
        """Test reading a UTF-8 file."""
        path = tmp_path / "areas.csv"
        path.write_text("code,eng,cym\nW06000001,Isle of Anglesey,Ynys Môn\n", encoding="utf-8")

        with InputFile(str(path)).open() as stream:
            assert "Ynys Môn" in stream.read()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that a missing file raises InputOpenError."""
        missing = tmp_path / "missing.csv"
        with pytest.raises(InputOpenError, match="Failed to open file"):
            InputFile(str(missing)).open()


class TestInputUrl:
    """Tests for downloaded sources."""

    def test_downloads_and_opens(self, tmp_path: Path) -> None:
        """Test that a URL is downloaded into the cache and opened."""
        mock_response = MagicMock()
        mock_response.iter_content.return_value = [b"code,eng,cym\n", b"W1,A,B\n"]

        with patch("bethyw.input.requests.get", return_value=mock_response) as mock_get:
            source = InputUrl("https://example.com/areas.csv", tmp_path)
            with source.open() as stream:
                assert stream.read() == "code,eng,cym\nW1,A,B\n"

        mock_get.assert_called_once()
        assert source.cache_path.exists()

    def test_uses_cache(self, tmp_path: Path) -> None:
        """Test that a cached download is reused."""
        source = InputUrl("https://example.com/areas.csv", tmp_path)
        source.cache_path.write_text("cached")

        with patch("bethyw.input.requests.get") as mock_get:
            assert source.download() == source.cache_path

        mock_get.assert_not_called()

    def test_force_redownloads(self, tmp_path: Path) -> None:
        """Test that force replaces a cached download."""
        source = InputUrl("https://example.com/areas.csv", tmp_path, force=True)
        source.cache_path.write_text("stale")
        mock_response = MagicMock()
        mock_response.iter_content.return_value = [b"fresh"]

        with patch("bethyw.input.requests.get", return_value=mock_response):
            source.download()

        assert source.cache_path.read_text() == "fresh"

    def test_http_error_raises(self, tmp_path: Path) -> None:
        """Test that HTTP errors raise and leave no partial file."""
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")

        with patch("bethyw.input.requests.get", return_value=mock_response):
            source = InputUrl("https://example.com/missing.csv", tmp_path)
            with pytest.raises(InputOpenError, match="Failed to download URL"):
                source.open()

        assert not source.cache_path.exists()
