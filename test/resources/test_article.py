import datetime
import logging
from typing import Dict, List

import pytest
from flask.testing import FlaskClient
from app import create_app
from model.article import ArticleViews
from model.errors import UpstreamFetchError
from repo.wikipedia import PageviewsRepo


class StubRepo(PageviewsRepo):

    def __init__(self, views_by_day: Dict[datetime.date, List[ArticleViews]], fail: bool = False):
        self._views_by_day = views_by_day
        self._fail = fail

    def top_articles_for_day(self, day: datetime.date) -> List[ArticleViews]:
        if self._fail:
            raise UpstreamFetchError("unable to fetch article counts: request failed with status code 404 Not Found")
        return self._views_by_day.get(day, [])

    def top_articles_for_days(self, days: List[datetime.date]) -> Dict[datetime.date, List[ArticleViews]]:
        return {d: self.top_articles_for_day(d) for d in days}


class BrokenRepo(StubRepo):

    def top_articles_for_days(self, days: List[datetime.date]) -> Dict[datetime.date, List[ArticleViews]]:
        raise KeyError("secret internals")


VIEWS = {
    datetime.date(2024, 1, 1): [ArticleViews("Main_Page", 100), ArticleViews("Python", 10)],
    datetime.date(2024, 1, 2): [ArticleViews("Main_Page", 90)],
    datetime.date(2024, 1, 3): [ArticleViews("Python", 5), ArticleViews("Main_Page", 80)],
    datetime.date(2024, 1, 20): [ArticleViews("Python", 500)],
    datetime.date(2024, 1, 21): [ArticleViews("Python", 500)],
}


def _client(repo: PageviewsRepo) -> FlaskClient:
    app = create_app(config={"log_level": "DEBUG"}, wikipedia_repo=repo)
    app.testing = True
    return app.test_client()


@pytest.fixture
def client() -> FlaskClient:
    return _client(StubRepo(VIEWS))


def test_hello(client: FlaskClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_data(as_text=True) == "Hello World!"


def test_top_articles_week(client: FlaskClient) -> None:
    response = client.get("/top-articles/2024/01/01?duration=week")
    assert response.status_code == 200
    assert response.get_json() == [
        {"article": "Main_Page", "views": 270},
        {"article": "Python", "views": 15},
    ]


def test_top_articles_month(client: FlaskClient) -> None:
    response = client.get("/top-articles/2024/01/15?duration=month")
    assert response.status_code == 200
    assert response.get_json() == [{"article": "Python", "views": 1000}]


def test_top_articles_missing_day(client: FlaskClient) -> None:
    response = client.get("/top-articles/2024/01?duration=week")
    assert response.status_code == 400
    assert response.get_json()["message"] == "A day must be provided."


@pytest.mark.parametrize("url", [
    "/top-articles/2024/01/01?duration=year",
    "/top-articles/2024/01/01",
    "/article-views/2024/01/01?title=Python&duration=year",
    "/article-views/2024/01/01?title=Python",
])
def test_invalid_duration(client: FlaskClient, url: str) -> None:
    response = client.get(url)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid duration. Please select either 'week' or 'month'."


@pytest.mark.parametrize("url", [
    "/top-articles/2024/02/30?duration=week",
    "/top-articles/24/01/01?duration=week",
    "/article-views/2024/13/01?title=Python&duration=week",
    "/max-views-day/2024/13?title=Python",
    "/max-views-day/abcd/01?title=Python",
])
def test_invalid_date(client: FlaskClient, url: str) -> None:
    response = client.get(url)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid date provided."


def test_article_views(client: FlaskClient) -> None:
    response = client.get("/article-views/2024/01/01?title=Python&duration=week")
    assert response.status_code == 200
    assert response.get_json() == {"title": "Python", "totalViews": 15}


def test_article_views_absent_title(client: FlaskClient) -> None:
    response = client.get("/article-views/2024/01/01?title=Missing&duration=week")
    assert response.status_code == 200
    assert response.get_json() == {"title": "Missing", "totalViews": 0}


@pytest.mark.parametrize("url", [
    "/article-views/2024/01/01?duration=week",
    "/article-views/2024/01/01?title=&duration=week",
    "/max-views-day/2024/01",
])
def test_missing_title(client: FlaskClient, url: str) -> None:
    response = client.get(url)
    assert response.status_code == 400
    assert response.get_json()["message"] == "A title must be provided."


def test_max_views_day_earliest_on_tie(client: FlaskClient) -> None:
    response = client.get("/max-views-day/2024/1?title=Python")
    assert response.status_code == 200
    assert response.get_json() == {"title": "Python", "mostViewsDate": "2024-01-20", "views": 500}


def test_max_views_day_not_found(client: FlaskClient) -> None:
    response = client.get("/max-views-day/2024/01?title=Missing")
    assert response.status_code == 404
    assert "Missing" in response.get_json()["message"]


def test_upstream_error() -> None:
    client = _client(StubRepo(VIEWS, fail=True))
    response = client.get("/top-articles/2024/01/01?duration=week")
    assert response.status_code == 500
    assert "status code 404" in response.get_json()["message"]


def test_unexpected_error_is_generic() -> None:
    client = _client(BrokenRepo(VIEWS))
    response = client.get("/article-views/2024/01/01?title=Python&duration=week")
    assert response.status_code == 500
    body = response.get_data(as_text=True)
    assert "secret internals" not in body
    assert response.get_json()["message"] == "Something went wrong!"


@pytest.mark.parametrize("url", [
    "/top-articles/9999/12/28?duration=week",
    "/top-articles/2024%0A/01/01?duration=week",
])
def test_out_of_range_or_malformed_date(client: FlaskClient, url: str) -> None:
    response = client.get(url)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid date provided."
