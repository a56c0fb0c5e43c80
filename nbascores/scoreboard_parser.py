"""
Basketball-Reference scoreboard parsing.

Turns the HTML of a daily scoreboard page (``/boxscores/?month=..&day=..&year=..``)
into GameRecord values. The markup has drifted over the seasons, so every step
tries a short, ordered list of strategies and skips a game summary outright
rather than emit a half-filled record.

None of these classes touch the logging module; pass any ``log(message)``
callable (``logger.info`` in the app) to observe what the parser decided.
"""
import re
from datetime import date
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup, Comment, ParserRejectedMarkup
from bs4.element import Tag

from nbascores.models import GameRecord, TeamResult
from nbascores.strategies import first_result

LogFn = Optional[Callable[[str], None]]

SUMMARY_SELECTOR = 'div.game_summary'
SUMMARY_MARKER = 'game_summary'
STATUS_SELECTOR = '.game_status, .game_summary .status, .game_summary_status strong'
DEFAULT_STATUS = 'Final'

NUMERIC_TEXT = re.compile(r'[0-9]+')
MAX_POINTS_DIGITS = 9
MARKED_SECTION = '<!['


def load_document(html) -> BeautifulSoup:
    """Parse markup into a soup, never raising on malformed input.

    html.parser recovers from broken tags on its own but rejects bogus
    ``<![...`` marked sections; those are escaped to text and parsed again.
    """
    try:
        return BeautifulSoup(html, 'html.parser')
    except ParserRejectedMarkup:
        pass
    if isinstance(html, bytes):
        escaped = html.replace(MARKED_SECTION.encode(), b'&lt;![')
    else:
        escaped = html.replace(MARKED_SECTION, '&lt;![')
    try:
        return BeautifulSoup(escaped, 'html.parser')
    except ParserRejectedMarkup:
        return BeautifulSoup('', 'html.parser')


class _Observed:
    def __init__(self, log: LogFn = None):
        self._log_fn = log

    def _log(self, message: str):
        if self._log_fn is not None:
            self._log_fn(message)


class SummaryCollector(_Observed):
    """Finds the per-game ``div.game_summary`` blocks of a scoreboard page."""

    def __init__(self, log: LogFn = None):
        super().__init__(log)
        self.strategies = (self._from_document, self._from_comments)

    def collect(self, document: BeautifulSoup) -> List[Tag]:
        return first_result(self.strategies, document) or []

    def _from_document(self, document) -> Optional[List[Tag]]:
        summaries = document.select(SUMMARY_SELECTOR)
        if not summaries:
            self._log("No game summaries found in main document; inspecting HTML comments")
            return None
        self._log(f"Discovered {len(summaries)} game summary div(s) in main document")
        return summaries

    def _from_comments(self, document) -> List[Tag]:
        # Fragments are searched for live summaries only; comments nested
        # inside a fragment are never re-parsed.
        collected = []
        for comment in document.find_all(string=lambda text: isinstance(text, Comment)):
            if SUMMARY_MARKER not in comment:
                continue
            try:
                fragment = load_document(str(comment))
            except ParserRejectedMarkup as e:
                self._log(f"Ignoring unparsable comment fragment: {e}")
                continue
            collected.extend(fragment.select(SUMMARY_SELECTOR))

        if collected:
            self._log(f"Discovered {len(collected)} game summary div(s) inside HTML comments")
        return collected


def _is_usable(row: Tag) -> bool:
    cells = row.find_all(['th', 'td'])
    return any(cell.get_text().strip() for cell in cells)


def usable_rows(table: Optional[Tag]) -> List[Tag]:
    if table is None:
        return []
    rows = table.select('tbody tr')
    if not rows:
        rows = table.find_all('tr')
    return [row for row in rows if _is_usable(row)]


def _pair_or_none(rows: List[Tag]) -> Optional[List[Tag]]:
    return rows if len(rows) >= 2 else None


def _linescore_rows(summary: Tag) -> Optional[List[Tag]]:
    return _pair_or_none(usable_rows(summary.select_one('table.linescore')))


def _teams_rows(summary: Tag) -> Optional[List[Tag]]:
    return _pair_or_none(usable_rows(summary.select_one('table.teams')))


def _any_table_rows(summary: Tag) -> Optional[List[Tag]]:
    tried = [summary.select_one('table.linescore'), summary.select_one('table.teams')]
    for table in summary.select('table'):
        if any(table is seen for seen in tried):
            continue
        rows = _pair_or_none(usable_rows(table))
        if rows:
            return rows
    return None


class TeamRowLocator:
    """Picks the two team rows out of a game summary and tells visitor from home."""

    TABLE_STRATEGIES = (_linescore_rows, _teams_rows, _any_table_rows)
    HEADER_ATTRIBUTES = ('data-stat', 'class', 'aria-label')

    def rows_for(self, summary: Tag) -> List[Tag]:
        return first_result(self.TABLE_STRATEGIES, summary) or []

    def assign_rows(self, rows: List[Tag]) -> Tuple[Optional[Tag], Optional[Tag]]:
        visitor_row = self._find_row(rows, 'visitor')
        if visitor_row is None and rows:
            visitor_row = rows[0]
        home_row = self._find_row(rows, 'home')
        if home_row is None and len(rows) > 1:
            home_row = rows[1]

        # Tags compare structurally with ==, identity is what matters here
        if home_row is not None and home_row is visitor_row:
            home_row = next((row for row in rows if row is not visitor_row), None)
        return visitor_row, home_row

    def _find_row(self, rows, keyword) -> Optional[Tag]:
        for row in rows:
            if self._class_match(row, keyword) or self._header_match(row, keyword):
                return row
        return None

    @staticmethod
    def _class_match(row: Tag, keyword: str) -> bool:
        return any(keyword in cls.lower() for cls in row.get('class', []))

    def _header_match(self, row: Tag, keyword: str) -> bool:
        header = row.find('th')
        if header is None:
            return False
        for attr in self.HEADER_ATTRIBUTES:
            value = header.get(attr)
            if value is None:
                continue
            if isinstance(value, list):
                value = ' '.join(value)
            if keyword in value.lower():
                return True
        return False


def _numeric_text(cell: Optional[Tag]) -> Optional[str]:
    if cell is None:
        return None
    text = cell.get_text().strip()
    return text if NUMERIC_TEXT.fullmatch(text) else None


def _points_from(selector: str):
    def strategy(row: Tag) -> Optional[str]:
        return _numeric_text(row.select_one(selector))
    strategy.__name__ = f"points_from[{selector}]"
    return strategy


def _last_numeric_cell(row: Tag) -> Optional[str]:
    # The total is the last numeric column; quarter scores sit before it.
    for cell in reversed(row.find_all('td')):
        text = _numeric_text(cell)
        if text is not None:
            return text
    return None


class TeamExtractor:
    """Reads a team's display name and final points from one table row."""

    POINTS_SELECTORS = (
        'td[data-stat$="_pts"]',
        'td[data-stat$="_score"]',
        'td[data-stat="pts"]',
        'td[data-stat="team_pts"]',
    )
    POINTS_STRATEGIES = tuple(_points_from(s) for s in POINTS_SELECTORS) + (_last_numeric_cell,)

    def from_row(self, row: Tag) -> Optional[TeamResult]:
        name = self.team_name(row)
        points = self.points(row)
        if not name or points is None:
            return None
        return TeamResult(name=name, points=points)

    @staticmethod
    def team_name(row: Tag) -> Optional[str]:
        cell = row.find(['th', 'td'])
        if cell is None:
            return None
        link = cell.find('a')
        name = link.get_text().strip() if link is not None else ''
        if not name:
            name = cell.get_text()
        return ' '.join(name.split()) or None

    def points(self, row: Tag) -> Optional[int]:
        text = first_result(self.POINTS_STRATEGIES, row)
        # Scores are a few digits at most; longer runs are junk cells
        if text is None or len(text) > MAX_POINTS_DIGITS:
            return None
        return int(text)


class GameBuilder(_Observed):
    """Turns one game summary block into a GameRecord, or None when it can't."""

    def __init__(self, log: LogFn = None, row_locator: Optional[TeamRowLocator] = None,
                 team_extractor: Optional[TeamExtractor] = None):
        super().__init__(log)
        self.row_locator = row_locator or TeamRowLocator()
        self.team_extractor = team_extractor or TeamExtractor()

    def build(self, summary: Tag, target_date: date) -> Optional[GameRecord]:
        rows = self.row_locator.rows_for(summary)
        if len(rows) < 2:
            return self._skip("unable to locate at least two team rows")

        visitor_row, home_row = self.row_locator.assign_rows(rows)
        if visitor_row is None or home_row is None:
            return self._skip("visitor or home row could not be determined")

        visitor = self.team_extractor.from_row(visitor_row)
        home = self.team_extractor.from_row(home_row)
        if visitor is None or home is None:
            return self._skip("unable to extract team names or scores")

        return GameRecord(
            date=target_date.strftime('%Y-%m-%d'),
            status=self.status_from(summary),
            home_team_name=home.name,
            visitor_team_name=visitor.name,
            home_score=home.points,
            visitor_score=visitor.points,
        )

    @staticmethod
    def status_from(summary: Tag) -> str:
        node = summary.select_one(STATUS_SELECTOR)
        status = node.get_text().strip() if node is not None else ''
        return status or DEFAULT_STATUS

    def _skip(self, reason: str) -> None:
        self._log(f"Skipping summary: {reason}")
        return None


class ScoreboardParser(_Observed):
    """Entry point: scoreboard HTML in, GameRecords out, in page order."""

    def __init__(self, log: LogFn = None, summary_collector: Optional[SummaryCollector] = None,
                 game_builder: Optional[GameBuilder] = None):
        super().__init__(log)
        self.summary_collector = summary_collector or SummaryCollector(log=log)
        self.game_builder = game_builder or GameBuilder(log=log)

    def parse(self, html, target_date: date) -> List[GameRecord]:
        document = load_document(html)
        summaries = self.summary_collector.collect(document)
        self._log(f"Found {len(summaries)} potential game summary section(s)")

        games = []
        for index, summary in enumerate(summaries, 1):
            self._log(f"Parsing game summary #{index}")
            game = self.game_builder.build(summary, target_date)
            if game is None:
                self._log(f"Skipping game summary #{index}: insufficient data")
                continue
            self._log(f"Parsed game summary #{index}: {game.summary()}")
            games.append(game)
        return games
