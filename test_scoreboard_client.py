#!/usr/bin/env python3
"""
Tests for the scoreboard fetcher.
Run with: pytest test_scoreboard_client.py -v
"""
import pytest
import requests
from datetime import date
from unittest.mock import MagicMock, Mock

from nbascores.models import GameRecord
from nbascores.scoreboard_client import ScoreboardClient, ScoreboardFetchError

GAME_DATE = date(2024, 3, 1)

SCOREBOARD_HTML = """
<html><body><div class="game_summary expanded nohover">
  <table class="teams"><tbody>
    <tr class="loser"><td><a href="/teams/CHI/2024.html">Chicago Bulls</a></td><td class="right">106</td><td class="right gamelink"><a href="/boxscores/202403010MIL.html">Final</a></td></tr>
    <tr class="winner"><td><a href="/teams/MIL/2024.html">Milwaukee Bucks</a></td><td class="right">107</td><td class="right"></td></tr>
  </tbody></table>
</div></body></html>
"""


def make_response(status_code=200, text=''):
    response = Mock()
    response.status_code = status_code
    response.text = text
    return response


class TestScoreboardClient:
    """Tests for ScoreboardClient."""

    @pytest.fixture
    def session(self):
        session = MagicMock()
        session.headers = {}
        return session

    @pytest.fixture
    def client(self, session):
        return ScoreboardClient(session=session)

    def test_initialization_sets_user_agent(self, client, session):
        """Test the session identifies itself with a descriptive user agent."""
        assert 'nba-scores' in session.headers['User-Agent']
        assert client.base_url == 'https://www.basketball-reference.com'

    def test_scoreboard_url(self, client):
        assert client.scoreboard_url(date(2024, 1, 5)) == \
            'https://www.basketball-reference.com/boxscores/?month=1&day=5&year=2024'

    def test_fetch_sends_date_query(self, client, session):
        session.get.return_value = make_response(200, '<html></html>')

        assert client.fetch(GAME_DATE) == (200, '<html></html>')
        session.get.assert_called_once_with(
            'https://www.basketball-reference.com/boxscores/',
            params={'month': 3, 'day': 1, 'year': 2024},
            timeout=30,
        )

    def test_fetch_returns_error_status_untouched(self, client, session):
        session.get.return_value = make_response(503, 'Service Unavailable')
        assert client.fetch(GAME_DATE) == (503, 'Service Unavailable')

    def test_fetch_wraps_network_errors(self, client, session):
        session.get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(ScoreboardFetchError) as exc_info:
            client.fetch(GAME_DATE)

        assert 'connection refused' in str(exc_info.value)

    def test_games_for_parses_page(self, client, session):
        session.get.return_value = make_response(200, SCOREBOARD_HTML)

        games = client.games_for(GAME_DATE)

        assert games == [GameRecord(
            date='2024-03-01',
            status='Final',
            home_team_name='Milwaukee Bucks',
            visitor_team_name='Chicago Bulls',
            home_score=107,
            visitor_score=106,
        )]

    def test_games_for_empty_page(self, client, session):
        session.get.return_value = make_response(200, '<html><body>No games</body></html>')
        assert client.games_for(GAME_DATE) == []

    @pytest.mark.parametrize('status_code', [301, 404, 429, 500])
    def test_games_for_non_2xx_raises(self, client, session, status_code):
        session.get.return_value = make_response(status_code, SCOREBOARD_HTML)
        client.parser = Mock()

        with pytest.raises(ScoreboardFetchError) as exc_info:
            client.games_for(GAME_DATE)

        assert f'HTTP {status_code}' in str(exc_info.value)
        client.parser.parse.assert_not_called()

    def test_games_for_rate_limited_page_raises(self, client, session):
        session.get.return_value = make_response(200, '<h1>Rate Limit Exceeded</h1>')

        with pytest.raises(ScoreboardFetchError, match='Rate limited'):
            client.games_for(GAME_DATE)

    def test_games_for_uses_injected_parser(self, session):
        parser = Mock()
        parser.parse.return_value = []
        session.get.return_value = make_response(200, SCOREBOARD_HTML)

        client = ScoreboardClient(session=session, parser=parser)
        client.games_for(GAME_DATE)

        parser.parse.assert_called_once_with(SCOREBOARD_HTML, GAME_DATE)


# Run tests if executed directly
if __name__ == '__main__':
    pytest.main([__file__, '-v'])
