import os
import tempfile
import unittest
from unittest.mock import patch, MagicMock

from sitemap_errors import SitemapImportError
from sitemap_import import SitemapSource, SourceKind, classify_source, fetch_source

SITEMAP_BYTES = b'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"></urlset>'


class TestClassifySource(unittest.TestCase):

    def test_classify_source(self):
        self.assertEqual(classify_source("https://example.com/sitemap.xml"),
                         SitemapSource(SourceKind.URL, "https://example.com/sitemap.xml"))
        self.assertEqual(classify_source("http://localhost:3000/sitemap.xml").kind, SourceKind.URL)
        self.assertEqual(classify_source("public/sitemap.xml"),
                         SitemapSource(SourceKind.FILE, "public/sitemap.xml"))
        # Only the prefix counts
        self.assertEqual(classify_source("ftp://example.com/sitemap.xml").kind, SourceKind.FILE)
        self.assertEqual(classify_source("HTTPS://example.com/sitemap.xml").kind, SourceKind.FILE)


class TestFetchSource(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        import shutil
        shutil.rmtree(self.test_dir)

    @patch('sitemap_import.requests.get')
    def test_fetch_url(self, mock_get):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content = SITEMAP_BYTES
        mock_get.return_value = mock_response

        data = fetch_source("https://example.com/sitemap.xml", timeout=5)
        self.assertEqual(data, SITEMAP_BYTES)
        mock_get.assert_called_once_with("https://example.com/sitemap.xml", timeout=5)
        mock_response.raise_for_status.assert_called_once()

    @patch('sitemap_import.time.sleep')
    @patch('sitemap_import.logging.warning')
    @patch('sitemap_import.requests.get')
    def test_connection_errors_are_retried(self, mock_get, mock_warning, mock_sleep):
        mock_response = MagicMock()
        mock_response.content = SITEMAP_BYTES
        mock_get.side_effect = [
            Exception("Connection timed out after 10001 milliseconds"),
            Exception("Recv failure: Connection reset by peer"),
            mock_response,
        ]

        data = fetch_source("https://example.com/sitemap.xml", retry_delays=[1, 2, 4])
        self.assertEqual(data, SITEMAP_BYTES)
        self.assertEqual(mock_get.call_count, 3)
        self.assertEqual([c.args[0] for c in mock_sleep.call_args_list], [1, 2])
        self.assertEqual(mock_warning.call_count, 2)

    @patch('sitemap_import.time.sleep')
    @patch('sitemap_import.logging.warning')
    @patch('sitemap_import.requests.get')
    def test_retries_are_exhausted(self, mock_get, mock_warning, mock_sleep):
        mock_get.side_effect = Exception("Operation timed out")

        with self.assertRaises(SitemapImportError) as cm:
            fetch_source("https://example.com/sitemap.xml", retry_delays=[1, 2])
        self.assertIn("failed to get https://example.com/sitemap.xml", str(cm.exception))
        self.assertEqual(mock_get.call_count, 2)
        mock_sleep.assert_called_once_with(1)

    @patch('sitemap_import.time.sleep')
    @patch('sitemap_import.requests.get')
    def test_http_errors_are_not_retried(self, mock_get, mock_sleep):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = Exception("HTTP Error 404: Not Found")
        mock_get.return_value = mock_response

        with self.assertRaises(SitemapImportError) as cm:
            fetch_source("https://example.com/sitemap.xml")
        self.assertIn("404", str(cm.exception))
        self.assertEqual(mock_get.call_count, 1)
        mock_sleep.assert_not_called()

    @patch('sitemap_import.requests.get')
    def test_no_retry_delays(self, mock_get):
        mock_get.side_effect = Exception("timeout")
        with self.assertRaises(SitemapImportError):
            fetch_source("https://example.com/sitemap.xml", retry_delays=[])
        self.assertEqual(mock_get.call_count, 1)

    @patch('sitemap_import.requests.get')
    def test_read_file(self, mock_get):
        sitemap_file = os.path.join(self.test_dir, "sitemap.xml")
        with open(sitemap_file, 'wb') as f:
            f.write(SITEMAP_BYTES)

        self.assertEqual(fetch_source(sitemap_file), SITEMAP_BYTES)
        mock_get.assert_not_called()

    def test_missing_file(self):
        missing = os.path.join(self.test_dir, "missing.xml")
        with self.assertRaises(SitemapImportError) as cm:
            fetch_source(missing)
        self.assertIn(f"failed to open {missing}", str(cm.exception))
        # Import errors are also OS errors
        self.assertIsInstance(cm.exception, OSError)


if __name__ == '__main__':
    unittest.main()
