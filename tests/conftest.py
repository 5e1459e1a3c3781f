"""Test configuration and fixtures."""

import pytest

from bvg_transit.config import Settings
from bvg_transit.core.scraper import BvgTransitScraper

AUTOCOMPLETE_SINGLE_PAGE = """<html><body>
<div class="ivuHeadline">Haltestelleninfo</div>
<p><strong>Jannowitzbr&#252;cke (Berlin)</strong></p>
<a href="/Fahrinfo/bin/stboard.bin/dox/dox?input=9100004&amp;boardType=dep">Abfahrten</a>
</body></html>
"""

AUTOCOMPLETE_MULTI_PAGE = """<html><body>
<p>Bitte w&#228;hlen Sie:</p>
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9100003&amp;boardType=dep">
S+U Alexanderplatz (Berlin)
</a><br />
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9100026&amp;boardType=dep">
Alexanderstra&szlig;e (Berlin)
</a><br />
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9100003&amp;boardType=dep">
S+U Alexanderplatz (Berlin)
</a><br />
</body></html>
"""

NEARBY_PAGE = """<html><body>
<a href="/Stadtplan/index?ld=0.1&amp;location=9100003,HST,WGS84,13.411267,52.521512&amp;label=S%2BU+Alexanderplatz+%28Berlin%29">Karte</a>
<table class="ivuTableOverview">
<thead><tr><th>Haltestelle</th><th>Entfernung</th></tr></thead>
<tbody>
<tr><td><a href="/Fahrinfo/bin/stboard.bin/dn?input=9100003&amp;boardType=dep">S+U Alexanderplatz (Berlin)</a></td><td>0 m</td></tr>
<tr><td><a href="/Fahrinfo/bin/stboard.bin/dn?input=9100024&amp;boardType=dep">Spandauer Str./Marienkirche (Berlin)</a></td><td>210 m</td></tr>
<tr><td><a href="/Fahrinfo/bin/stboard.bin/dn?input=9100026&amp;boardType=dep">Alexanderstra&#223;e (Berlin)</a></td><td>320 m</td></tr>
<tr><td><a href="/Fahrinfo/bin/stboard.bin/dn?input=9100024&amp;boardType=dep">Spandauer Str./Marienkirche (Berlin)</a></td><td>210 m</td></tr>
<tr><td><a href="/Fahrinfo/bin/stboard.bin/dn?input=9230999&amp;boardType=dep">Potsdam, Hauptbahnhof</a></td><td>900 m</td></tr>
</tbody>
</table>
</body></html>
"""

NEARBY_ERROR_PAGE = """<html><body>
<p>Ihre Anfrage kann derzeit leider nicht bearbeitet werden.</p>
</body></html>
"""

CONNECTIONS_PAGE = """<html><body>
<div class="ivuHeadline">
Von: <strong>S+U Alexanderplatz (Berlin)</strong><br />
Nach: <strong>S+U Zoologischer Garten (Berlin)</strong><br />
Datum: Sa, 18.10.26<br />
</div>
<a href="/Fahrinfo/bin/query.bin/dox?ld=0.1&amp;seqnr=1&amp;ident=ab.0&amp;REQ0HafasScrollDir=2">Fr&#252;her</a>
<p class="conL">
<a href="/Fahrinfo/bin/query.bin/dox?ld=0.1&amp;co=C0-0&amp;seqnr=1">22:10-22:35</a>&nbsp;&nbsp;S 5
</p>
<p class="conD">
<a href="/Fahrinfo/bin/query.bin/dox?ld=0.1&amp;co=C0-1&amp;seqnr=1">23:50-00:20</a>&nbsp;&nbsp;1 Umst.
</p>
<p class="conL">
<a href="/Fahrinfo/bin/query.bin/dox?ld=0.1&amp;co=C0-2&amp;seqnr=1">00:15-00:40</a>&nbsp;&nbsp;U 2
</p>
<a href="/Fahrinfo/bin/query.bin/dox?ld=0.1&amp;seqnr=1&amp;ident=ab.0&amp;REQ0HafasScrollDir=1">Sp&#228;ter</a>
</body></html>
"""

AMBIGUOUS_PAGE = """<html><body>
<form action="/Fahrinfo/bin/query.bin/dox" method="post">
<select name="REQ0JourneyStopsS0K">
<option value="0"> Alexanderplatz </option>
<option value="1">Alexanderstra&#223;e</option>
</select>
</form>
</body></html>
"""

DETAILS_PAGE = """<html><body>
<div class="ivuHeadline">Verbindungsdetails</div>
<p>Datum: 18.10.26</p>
<p class="conL">
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9100003&amp;boardType=dep">
<strong>S+U Alexanderplatz (Berlin)</strong>
</a>
<br />
ab 08:00
Gl. 2
<br />
<strong>S 5</strong>
<br />
Ri. S Westkreuz (Berlin)
<br />
an 08:20
Gl. 4
<br />
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9003201&amp;boardType=dep">
<strong>S+U Zoologischer Garten (Berlin)</strong></a>
</p>
<p class="conD">
3 Min.
Fussweg
<br />
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9003104">
<strong>Hardenbergplatz (Berlin)</strong>
</a>
</p>
<p class="conL">
4 Min.
&#220;bergang
<br />
<a href="/Stadtplan/index?ld=0.1&amp;location=WGS84,13334400,52506600&amp;label=Zoo">Bahnhof Zoo Busbahnhof</a>
</p>
<p class="conD">
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9003104&amp;boardType=dep">
<strong>Hardenbergplatz (Berlin)</strong>
</a>
<br />
ab 08:30
<br />
<strong>Bus 200</strong>
<br />
Ri. Michelangelostr. (Berlin)
<br />
an 09:00
<br />
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9110011&amp;boardType=dep">
<strong>Memhardstr. (Berlin)</strong></a>
</p>
</body></html>
"""

DETAILS_OVERNIGHT_PAGE = """<html><body>
<p>Abfahrt: 18.10.26</p>
<p class="conL">
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9100003&amp;boardType=dep">
<strong>S+U Alexanderplatz (Berlin)</strong>
</a>
<br />
ab 23:50
<br />
<strong>U 2</strong>
<br />
Ri. S+U Pankow (Berlin)
<br />
an 00:10
<br />
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9110001&amp;boardType=dep">
<strong>S+U Sch&#246;nhauser Allee (Berlin)</strong></a>
</p>
<p class="conD">
2 Min.
Fussweg
<br />
<strong>Sch&#246;nhauser Allee</strong>
</p>
<p class="conL">
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9110001&amp;boardType=dep">
<strong>S+U Sch&#246;nhauser Allee (Berlin)</strong>
</a>
<br />
ab 00:20
<br />
<strong>Tram M10</strong>
<br />
Ri. Warschauer Str. (Berlin)
<br />
an 00:40
<br />
<a href="/Fahrinfo/bin/stboard.bin/dox?input=9120025&amp;boardType=dep">
<strong>Eberswalder Str. (Berlin)</strong></a>
</p>
</body></html>
"""

DEPARTURES_PLAN_PAGE = """<html><body>
<div class="ivuHeadline"><strong>S+U Alexanderplatz (Berlin)</strong></div>
<p>Datum: 18.10.2026, 23:30:00<br /></p>
<table class="ivuTableOverview">
<tr class="ivu_table_bg1">
<td><strong>23:50</strong></td>
<td><strong>S 5 </strong></td>
<td>(Gl. 2)</td>
<td><a href="/Fahrinfo/bin/stboard.bin/dox/dox?ld=0.1&amp;evaId=9024101&amp;boardType=dep">S Westkreuz (Berlin)</a></td>
</tr>
<tr class="ivu_table_bg2">
<td><strong>23:50</strong></td>
<td><strong>S 5 </strong></td>
<td>(Gl. 2)</td>
<td><a href="/Fahrinfo/bin/stboard.bin/dox/dox?ld=0.1&amp;evaId=9024101&amp;boardType=dep">S Westkreuz (Berlin)</a></td>
</tr>
<tr class="ivu_table_bg1">
<td><strong>0:10</strong></td>
<td><strong>Bus TXL*</strong></td>
<td><a href="/Fahrinfo/bin/stboard.bin/dox/dox?ld=0.1&amp;evaId=9100027&amp;boardType=dep">Flughafen Tegel (Berlin)</a></td>
</tr>
</table>
</body></html>
"""

DEPARTURES_LIVE_PAGE = """<html><body>
<div><strong>S+U Alexanderplatz</strong></div>
<p>Datum: 18.10.2026, 23:30:00<br /></p>
<table>
<tr class="ivu_table_bg1">
<td class="ivu_table_c_dep">
23:45
</td>
<td class="ivu_table_c_line">
U2
</td>
<td>
<a href="/IstAbfahrtzeiten/index/mobil?input=100012">
S+U Pankow
</a>
</td>
</tr>
<tr class="ivu_table_bg2">
<td class="ivu_table_c_dep">
00:05 *
</td>
<td class="ivu_table_c_line">
Tram M4
</td>
<td>
<a href="/IstAbfahrtzeiten/index/mobil?input=100500">
Zingster Stra&szlig;e
</a>
</td>
</tr>
</table>
</body></html>
"""

DEPARTURES_SERVICE_DOWN_PAGE = """<html><body>
<p>Die Abfahrtsanzeige steht wegen Wartungsarbeiten nicht zur Verf&#252;gung.</p>
</body></html>
"""


class FakeFetcher:
    """Serves a fixed page and records the requested URLs."""

    def __init__(self, page: str):
        self.page = page
        self.urls: list[str] = []

    def __call__(self, url: str) -> str:
        self.urls.append(url)
        return self.page


@pytest.fixture
def settings():
    """Settings with the default service host."""
    return Settings(base_url="http://mobil.bvg.de")


@pytest.fixture
def make_scraper(settings):
    """Build a scraper that serves the given page for every request."""

    def _make(page: str) -> tuple[BvgTransitScraper, FakeFetcher]:
        fetcher = FakeFetcher(page)
        return BvgTransitScraper(fetch=fetcher, settings=settings), fetcher

    return _make


@pytest.fixture
def autocomplete_single_page():
    return AUTOCOMPLETE_SINGLE_PAGE


@pytest.fixture
def autocomplete_multi_page():
    return AUTOCOMPLETE_MULTI_PAGE


@pytest.fixture
def nearby_page():
    return NEARBY_PAGE


@pytest.fixture
def nearby_error_page():
    return NEARBY_ERROR_PAGE


@pytest.fixture
def connections_page():
    return CONNECTIONS_PAGE


@pytest.fixture
def ambiguous_page():
    return AMBIGUOUS_PAGE


@pytest.fixture
def details_page():
    """Trip, two walks in a row, trip."""
    return DETAILS_PAGE


@pytest.fixture
def details_overnight_page():
    return DETAILS_OVERNIGHT_PAGE


@pytest.fixture
def departures_plan_page():
    return DEPARTURES_PLAN_PAGE


@pytest.fixture
def departures_live_page():
    return DEPARTURES_LIVE_PAGE


@pytest.fixture
def departures_service_down_page():
    return DEPARTURES_SERVICE_DOWN_PAGE
