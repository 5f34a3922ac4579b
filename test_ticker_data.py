import io
import json
import logging
import re
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

import pandas as pd
import requests

from yahoo_stats_scraper import main as cli
from yahoo_stats_scraper.config import HEADERS, ScraperConfig
from yahoo_stats_scraper.data_extractor import get_ticker_data, ticker_stats_url, ticker_url
from yahoo_stats_scraper.exceptions import FetchError, MissingSectionError
from yahoo_stats_scraper.storage import default_output_filename, save_to_disk, save_valuation_csv
from yahoo_stats_scraper.yahoo_client import YahooClient

TEST_DATA = Path(__file__).parent / 'test_data'

GOOG_SUMMARY = (TEST_DATA / 'goog.summary.html').read_text(encoding='utf-8')
GOOG_STATS = (TEST_DATA / 'goog.stats.html').read_text(encoding='utf-8')


def fake_get(pages):
    """Stand-in for requests.get serving `pages` by URL and 404 for anything else."""
    def _get(url, headers=None, timeout=None):
        response = mock.Mock()
        if url in pages:
            response.status_code = 200
            response.text = pages[url]
            response.raise_for_status.return_value = None
        else:
            response.status_code = 404
            response.text = "Not Found"
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                "404 Client Error: Not Found", response=response
            )
        return response
    return _get


def goog_pages(ticker: str):
    return {
        ticker_url(ticker): GOOG_SUMMARY,
        ticker_stats_url(ticker): GOOG_STATS,
    }


class TestUrls(unittest.TestCase):

    def test_ticker_urls(self):
        self.assertEqual(ticker_url('GOOG'), 'https://finance.yahoo.com/quote/GOOG')
        self.assertEqual(ticker_stats_url('GOOG'),
                         'https://finance.yahoo.com/quote/GOOG/key-statistics?p=GOOG')

    def test_custom_base_url(self):
        config = ScraperConfig(base_url='http://localhost:8000/quote/')
        self.assertEqual(config.ticker_url('grwg'), 'http://localhost:8000/quote/grwg')
        self.assertEqual(config.ticker_stats_url('grwg'),
                         'http://localhost:8000/quote/grwg/key-statistics?p=grwg')

    def test_negative_valuation_column_rejected(self):
        with self.assertRaises(ValueError):
            ScraperConfig(valuation_column=-1)


class TestYahooClient(unittest.TestCase):
    """Page downloads."""

    def test_fetch_returns_body_and_sends_browser_headers(self):
        url = 'https://example.com'
        with mock.patch('yahoo_stats_scraper.yahoo_client.requests.get',
                        side_effect=fake_get({url: '<html><title>Test</title></html>'})) as get:
            body = YahooClient(timeout=5).fetch_html(url)

        self.assertIn('<title>Test</title>', body)
        _, kwargs = get.call_args
        self.assertEqual(kwargs['headers'], HEADERS)
        self.assertEqual(kwargs['timeout'], 5)
        self.assertTrue(kwargs['headers']['User-Agent'].startswith('Mozilla/5.0'))

    def test_non_success_status_raises_fetch_error(self):
        url = 'https://example.com/missing'
        with mock.patch('yahoo_stats_scraper.yahoo_client.requests.get', side_effect=fake_get({})):
            with self.assertRaises(FetchError) as ctx:
                YahooClient().fetch_html(url)

        self.assertEqual(ctx.exception.url, url)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIsInstance(ctx.exception.__cause__, requests.exceptions.HTTPError)

    def test_transport_failure_raises_fetch_error(self):
        with mock.patch('yahoo_stats_scraper.yahoo_client.requests.get',
                        side_effect=requests.exceptions.ConnectionError("connection refused")):
            with self.assertRaises(FetchError) as ctx:
                YahooClient().fetch_html('https://example.com')

        self.assertIsNone(ctx.exception.status_code)

    def test_redirect_status_raises_fetch_error(self):
        """A final 3xx response is not a page body."""
        url = 'https://example.com/quote'
        for status in (300, 304):
            response = requests.Response()
            response.status_code = status
            response.url = url
            response._content = b''
            with self.subTest(status=status), \
                    mock.patch('yahoo_stats_scraper.yahoo_client.requests.get', return_value=response):
                with self.assertRaises(FetchError) as ctx:
                    YahooClient().fetch_html(url)
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(ctx.exception.url, url)

    def test_session_is_used_when_given(self):
        session = mock.Mock(spec=requests.Session)
        session.get.side_effect = fake_get({'https://example.com': 'ok'})

        self.assertEqual(YahooClient(session=session).fetch_html('https://example.com'), 'ok')
        session.get.assert_called_once()

    def test_custom_headers(self):
        client = YahooClient(headers={'User-Agent': 'test-agent'})
        self.assertEqual(client.headers, {'User-Agent': 'test-agent'})


class TestGetTickerData(unittest.TestCase):
    """End-to-end extraction with stubbed downloads."""

    @classmethod
    def setUpClass(cls):
        cls.logger = logging.getLogger(__name__)

    def test_gets_all_values(self):
        ticker = 'grwg'
        with mock.patch('yahoo_stats_scraper.yahoo_client.requests.get',
                        side_effect=fake_get(goog_pages(ticker))) as get:
            data = get_ticker_data(ticker)

        self.assertEqual(set(data), {'summary', 'stats'})
        self.assertEqual(get.call_count, 2)

        summary = data['summary']
        self.assertEqual(summary['Previous Close'], 136.2)
        self.assertEqual(summary['Ask'], '137.57 x 800')
        self.assertIn('EPS (TTM)', summary)
        self.assertIn('Market Cap', summary)

        stats = data['stats']
        self.assertIn('Fiscal Year Ends', stats)
        self.assertIn('Most Recent Quarter (mrq)', stats)
        self.assertIn('Profit Margin', stats)
        self.assertEqual(stats['quarter'], 'Current')

        # Plain data, ready for serialization
        self.assertEqual(json.loads(json.dumps(data)), data)
        self.logger.info(f"Extracted {len(summary)} summary and {len(stats)} stats values")

    def test_includes_valuation_measures_on_request(self):
        with mock.patch('yahoo_stats_scraper.yahoo_client.requests.get',
                        side_effect=fake_get(goog_pages('GOOG'))):
            data = get_ticker_data('GOOG', include_valuation_measures=True)

        self.assertEqual(len(data['valuation_measures']), 6)
        self.assertEqual(data['valuation_measures'][0]['quarter'], 'Current')

    def test_uses_given_client(self):
        client = mock.Mock(spec=YahooClient)
        client.fetch_html.side_effect = [GOOG_SUMMARY, GOOG_STATS]

        data = get_ticker_data('GOOG', client=client)

        self.assertEqual(data['summary']['Previous Close'], 136.2)
        urls = [c.args[0] for c in client.fetch_html.call_args_list]
        self.assertEqual(urls, [ticker_url('GOOG'), ticker_stats_url('GOOG')])

    def test_failed_fetch_propagates(self):
        pages = {ticker_url('GOOG'): GOOG_SUMMARY}
        with mock.patch('yahoo_stats_scraper.yahoo_client.requests.get', side_effect=fake_get(pages)):
            with self.assertRaises(FetchError) as ctx:
                get_ticker_data('GOOG')
        self.assertEqual(ctx.exception.url, ticker_stats_url('GOOG'))

    def test_wrong_page_propagates_missing_section(self):
        pages = {
            ticker_url('GOOG'): GOOG_SUMMARY,
            ticker_stats_url('GOOG'): GOOG_SUMMARY,
        }
        with mock.patch('yahoo_stats_scraper.yahoo_client.requests.get', side_effect=fake_get(pages)):
            with self.assertRaises(MissingSectionError):
                get_ticker_data('GOOG')


class TestStorage(unittest.TestCase):
    """Saving records to disk."""

    def test_save_creates_folder_and_writes_json(self):
        record = {'summary': {'Previous Close': 136.2}, 'stats': {'Profit Margin': '24.01%'}}
        with tempfile.TemporaryDirectory() as tmp:
            out_dir = Path(tmp) / 'out' / 'nested'
            path = save_to_disk('GOOG.json', record, out_dir)

            self.assertEqual(path, out_dir / 'GOOG.json')
            self.assertEqual(json.loads(path.read_text(encoding='utf-8')), record)

    def test_save_writes_strings_verbatim(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = save_to_disk('page.html', '<html></html>', tmp)
            self.assertEqual(path.read_text(encoding='utf-8'), '<html></html>')

    def test_default_output_filename(self):
        self.assertRegex(default_output_filename('goog'), r'^GOOG_\d{8}\.json$')

    def test_save_valuation_csv(self):
        measures = [
            {'quarter': 'Current', 'Trailing P/E': '26.34'},
            {'quarter': '9/30/2023', 'Trailing P/E': '27.12'},
        ]
        with tempfile.TemporaryDirectory() as tmp:
            path = save_valuation_csv(measures, 'goog', tmp)
            df = pd.read_csv(path, dtype=str)

        self.assertTrue(re.match(r'^GOOG_\d{8}\.valuation\.csv$', path.name))
        self.assertEqual(list(df.columns), ['ticker', 'quarter', 'Trailing P/E'])
        self.assertEqual(df['quarter'].tolist(), ['Current', '9/30/2023'])
        self.assertEqual(df['ticker'].tolist(), ['GOOG', 'GOOG'])


class TestCommandLine(unittest.TestCase):
    """CLI entry point."""

    RECORD = {'summary': {'Previous Close': 136.2}, 'stats': {'Profit Margin': '24.01%'}}

    def setUp(self):
        patcher = mock.patch.object(cli, 'setup_logging',
                                    return_value=logging.getLogger('yahoo_stats_scraper'))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_prints_json_without_output(self):
        stdout = io.StringIO()
        with mock.patch.object(cli, 'get_ticker_data', return_value=dict(self.RECORD)) as get, \
                redirect_stdout(stdout):
            exit_code = cli.main(['goog'])

        self.assertEqual(exit_code, 0)
        self.assertEqual(json.loads(stdout.getvalue()), self.RECORD)
        self.assertEqual(get.call_args.args[0], 'GOOG')

    def test_writes_output_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            output = Path(tmp) / 'records' / 'goog.json'
            with mock.patch.object(cli, 'get_ticker_data', return_value=dict(self.RECORD)):
                exit_code = cli.main(['GOOG', '-o', str(output)])

            self.assertEqual(exit_code, 0)
            self.assertEqual(json.loads(output.read_text(encoding='utf-8')), self.RECORD)

    def test_valuation_csv_option(self):
        record = dict(self.RECORD, valuation_measures=[{'quarter': 'Current'}])
        with mock.patch.object(cli, 'get_ticker_data', return_value=record) as get, \
                mock.patch.object(cli, 'save_valuation_csv') as save_csv, \
                redirect_stdout(io.StringIO()) as stdout:
            exit_code = cli.main(['GOOG', '--valuation-csv'])

        self.assertEqual(exit_code, 0)
        self.assertTrue(get.call_args.kwargs['include_valuation_measures'])
        save_csv.assert_called_once()
        self.assertNotIn('valuation_measures', json.loads(stdout.getvalue()))

    def test_verbose_flag_enables_debug_logging(self):
        with mock.patch.object(cli, 'get_ticker_data', return_value=dict(self.RECORD)) as get, \
                redirect_stdout(io.StringIO()):
            cli.main(['GOOG', '-v'])

        self.assertTrue(get.call_args.kwargs['config'].verbose)
        cli.setup_logging.assert_called_once_with(verbose=True)

    def test_default_logging_is_not_verbose(self):
        with mock.patch.object(cli, 'get_ticker_data', return_value=dict(self.RECORD)), \
                redirect_stdout(io.StringIO()):
            cli.main(['GOOG'])

        cli.setup_logging.assert_called_once_with(verbose=False)

    def test_scraper_error_exits_with_failure(self):
        with mock.patch.object(cli, 'get_ticker_data', side_effect=FetchError('https://x', 'boom')), \
                mock.patch('sys.stderr', new_callable=io.StringIO):
            exit_code = cli.main(['GOOG'])

        self.assertEqual(exit_code, 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
