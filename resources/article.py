import logging
from typing import Any, Dict, List, Optional

from flask import request
from flask_restful import Resource

from date.resolvers import check_duration, parse_date, parse_month
from model.errors import MissingParameterError
from service.aggregator import PageviewsAggregator


def _required_title() -> str:
    title = request.args.get("title")
    if not title:
        raise MissingParameterError("A title must be provided.")
    return title


class AggregatorResource(Resource):  # type: ignore

    def __init__(self, **kwargs: Any):
        logger: Optional[logging.Logger] = kwargs.get("logger") or None
        if not logger:
            raise ValueError("logger not provided")
        self._logger = logger
        aggregator: Optional[PageviewsAggregator] = kwargs.get(
            "aggregator") or None
        if not aggregator:
            raise ValueError("aggregator not provided")
        self._aggregator = aggregator


class TopArticles(AggregatorResource):

    def get(self, year: str, month: str, day: Optional[str] = None) -> List[Dict[str, Any]]:
        duration = check_duration(request.args.get("duration"))
        start = parse_date(year, month, day)
        article_views = self._aggregator.top_articles(start, duration)
        self._logger.debug("returning %d top articles", len(article_views))
        return [a.asdict() for a in article_views]


class ArticleViewsForTitle(AggregatorResource):

    def get(self, year: str, month: str, day: str) -> Dict[str, Any]:
        title = _required_title()
        duration = check_duration(request.args.get("duration"))
        start = parse_date(year, month, day)
        self._logger.debug("article views request for %s", title)
        return self._aggregator.article_views(title, start, duration).asdict()


class MaxViewsDay(AggregatorResource):

    def get(self, year: str, month: str) -> Dict[str, Any]:
        title = _required_title()
        first_day = parse_month(year, month)
        self._logger.debug("max views day request for %s", title)
        return self._aggregator.max_views_day(title, first_day.year, first_day.month).asdict()
