import datetime
from typing import Any, Dict, NamedTuple


class ArticleViews(NamedTuple):
    """
    Represents the view count of an article, either for a single day or summed
    over a range of days.
    """
    article_title: str
    view_count: int

    def asdict(self) -> Dict[str, Any]:
        return {"article": self.article_title, "views": self.view_count}


class TitleSummary(NamedTuple):
    title: str
    total_views: int

    def asdict(self) -> Dict[str, Any]:
        return {"title": self.title, "totalViews": self.total_views}


class MaxViewDay(NamedTuple):
    """
    The day in a month on which an article had the most views.
    """
    title: str
    most_views_date: datetime.date
    views: int

    def asdict(self) -> Dict[str, Any]:
        return {"title": self.title,
                "mostViewsDate": self.most_views_date.isoformat(),
                "views": self.views}
