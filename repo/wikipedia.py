from abc import ABC, abstractmethod
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
import datetime
import json
import logging
from typing import Any, Dict, List, Optional

import requests
from model.article import ArticleViews
from model.errors import UpstreamFetchError


class PageviewsRepo(ABC):

    @abstractmethod
    def top_articles_for_day(self, day: datetime.date) -> List[ArticleViews]:
        pass

    @abstractmethod
    def top_articles_for_days(self, days: List[datetime.date]) -> Dict[datetime.date, List[ArticleViews]]:
        pass

    @staticmethod
    def json_to_articles(encoded: str | bytes) -> List[ArticleViews]:
        """
        Decode a top articles response body.
        :raises UpstreamFetchError: if the body does not have the expected shape
        """
        try:
            decoded = json.loads(encoded)
        except ValueError as e:
            raise UpstreamFetchError(
                "malformed response from Wikipedia: {}".format(e))
        items = decoded.get("items") if isinstance(decoded, dict) else None
        if not items or not isinstance(items, list) or not isinstance(items[0], dict):
            raise UpstreamFetchError("malformed response from Wikipedia: no items")
        articles = items[0].get("articles")
        if not isinstance(articles, list):
            raise UpstreamFetchError(
                "malformed response from Wikipedia: no articles")
        return [PageviewsRepo._to_article_views(a) for a in articles]

    @staticmethod
    def _to_article_views(article: Any) -> ArticleViews:
        if not isinstance(article, dict):
            raise UpstreamFetchError(
                "malformed response from Wikipedia: article is not an object")
        title = article.get("article")
        views = article.get("views")
        if not isinstance(title, str):
            raise UpstreamFetchError(
                "malformed response from Wikipedia: article title missing")
        # bool is an int subclass
        if not isinstance(views, int) or isinstance(views, bool) or views < 0:
            raise UpstreamFetchError(
                "malformed response from Wikipedia: invalid views for {}".format(title))
        return ArticleViews(article_title=title, view_count=views)


class WikipediaRestRepo(PageviewsRepo):
    _WIKIPEDIA_URL_TEMPLATE = "https://wikimedia.org/api/rest_v1/metrics/pageviews/top/{project}/{access}/{day:%Y/%m/%d}"

    def __init__(self, max_concurrency: int, logger: logging.Logger,
                 project: str = "en.wikipedia", access: str = "all-access",
                 user_agent: str = "Wikipedia-API-Wrapper/1.0",
                 timeout: Optional[float] = None):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._worker_pool = ThreadPoolExecutor(max_workers=max_concurrency)
        self._logger = logger
        self._project = project
        self._access = access
        self._headers = {"user-agent": user_agent,
                         "accept": "application/json"}
        self._timeout = timeout
        self._logger.info("instantiated rest repo for %s/%s with %d workers",
                          project, access, max_concurrency)

    def top_articles_for_day(self, day: datetime.date) -> List[ArticleViews]:
        """
        Fetch the top article view counts for a day from Wikipedia's REST API.
        :raises UpstreamFetchError: if an error occurs while fetching data.
        """
        url = self._url_for_date(day)
        return self.json_to_articles(self._get_json(url))

    def top_articles_for_days(self, days: List[datetime.date]) -> Dict[datetime.date, List[ArticleViews]]:
        """
        Fetch article counts in parallel, and return them grouped by day.
        Either every day is fetched or the first failure is raised; fetches
        that have not started yet are cancelled on failure.
        :param days: the days to fetch for
        :return: results grouped by day, in the order of the given days
        """
        futures: List[Future[List[ArticleViews]]] = [
            self._worker_pool.submit(self.top_articles_for_day, d) for d in days]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [f for f in futures if f in done and f.exception() is not None]
        if failed:
            for f in futures:
                f.cancel()
            error = failed[0].exception()
            assert error
            raise error
        return {d: f.result() for d, f in zip(days, futures)}

    def _url_for_date(self, day: datetime.date) -> str:
        return self._WIKIPEDIA_URL_TEMPLATE.format(
            project=self._project, access=self._access, day=day)

    def _get_json(self, uri: str) -> str:
        self._logger.debug("fetch %s", uri)
        try:
            response = requests.get(
                uri, headers=self._headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise UpstreamFetchError(
                "unable to fetch article counts: {}".format(e))
        if not response.ok:
            raise UpstreamFetchError(
                "unable to fetch article counts: request failed with status code {:d} {}".format(
                    response.status_code, response.reason))
        try:
            return str(response.content, "utf-8")
        except UnicodeDecodeError as e:
            raise UpstreamFetchError(
                "malformed response from Wikipedia: {}".format(e))
