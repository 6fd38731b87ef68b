import datetime
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from date.resolvers import days_in_month, days_in_range
from model.article import ArticleViews, MaxViewDay, TitleSummary
from model.errors import TitleNotFoundError
from repo.wikipedia import PageviewsRepo


def sum_views_by_article(nested_article_views: Iterable[List[ArticleViews]]) -> List[ArticleViews]:
    """
    Merge and sort nested article view counts.
    :param nested_article_views: an iterable of view counts by day
    :return: total views per article, highest first; ties keep first-seen order
    """
    views_by_article: Dict[str, int] = {}
    for day_views in nested_article_views:
        for article_views in day_views:
            views_by_article[article_views.article_title] = views_by_article.get(
                article_views.article_title, 0) + article_views.view_count

    return sorted(
        (ArticleViews(article_title=title, view_count=views)
         for title, views in views_by_article.items()),
        key=lambda a: a.view_count, reverse=True)


def views_for_title(day_views: List[ArticleViews], title: str) -> Optional[int]:
    """
    Views of an article on one day, summing repeated entries the same way
    sum_views_by_article does; None if the article is not listed.
    """
    matches = [a.view_count for a in day_views if a.article_title == title]
    return sum(matches) if matches else None


def total_views_for_title(nested_article_views: Iterable[List[ArticleViews]], title: str) -> int:
    """
    Sum the views of a single article; days where it is absent count as zero.
    """
    return sum(views_for_title(day_views, title) or 0 for day_views in nested_article_views)


def find_max_view_day(views_by_day: Dict[datetime.date, List[ArticleViews]], title: str) -> Optional[Tuple[datetime.date, int]]:
    """
    Find the day with the strictly highest view count for an article.
    :param views_by_day: view counts grouped by day
    :return: the day and its views, the earliest day on ties, or None if the
    article never appears
    """
    best: Optional[Tuple[datetime.date, int]] = None
    for day in sorted(views_by_day):
        views = views_for_title(views_by_day[day], title)
        if views is not None and (best is None or views > best[1]):
            best = (day, views)
    return best


class PageviewsAggregator:

    def __init__(self, wikipedia_repo: PageviewsRepo, logger: logging.Logger):
        self._wikipedia_repo = wikipedia_repo
        self._logger = logger

    def top_articles(self, start: datetime.date, duration: str) -> List[ArticleViews]:
        days = days_in_range(start, duration)
        self._logger.info("top articles for %s from %s (%d days)",
                          duration, start, len(days))
        views_by_day = self._wikipedia_repo.top_articles_for_days(days)
        return sum_views_by_article(views_by_day.values())

    def article_views(self, title: str, start: datetime.date, duration: str) -> TitleSummary:
        days = days_in_range(start, duration)
        self._logger.info("views of %s for %s from %s (%d days)",
                          title, duration, start, len(days))
        views_by_day = self._wikipedia_repo.top_articles_for_days(days)
        return TitleSummary(title=title, total_views=total_views_for_title(views_by_day.values(), title))

    def max_views_day(self, title: str, year: int, month: int) -> MaxViewDay:
        """
        Get the day of the month with the most views for an article.
        :raises TitleNotFoundError: if the article is not in the top articles
        on any day of the month
        """
        self._logger.info("max views day of %s for %04d-%02d",
                          title, year, month)
        views_by_day = self._wikipedia_repo.top_articles_for_days(
            days_in_month(year, month))
        max_day = find_max_view_day(views_by_day, title)
        if max_day is None:
            raise TitleNotFoundError(
                "No views found for '{}' in {:04d}-{:02d}.".format(title, year, month))
        return MaxViewDay(title=title, most_views_date=max_day[0], views=max_day[1])
