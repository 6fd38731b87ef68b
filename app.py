import os
from typing import Any, Dict, Optional

from flask import Flask
from flask_restful import Api
from werkzeug.exceptions import HTTPException
import yaml

from model.errors import InternalError
from repo.wikipedia import PageviewsRepo, WikipediaRestRepo
from resources.article import ArticleViewsForTitle, MaxViewsDay, TopArticles
from service.aggregator import PageviewsAggregator

DEFAULT_CONFIG: Dict[str, Any] = {
    "wikipedia_fetch_concurrency": 31,
    "wikipedia_project": "en.wikipedia",
    "wikipedia_access": "all-access",
    "wikipedia_user_agent": "Wikipedia-API-Wrapper/1.0",
    "wikipedia_timeout_seconds": None,
    "log_level": "INFO",
    "port": 3000,
}

errors = {
    'InternalError': {
        'message': "Something went wrong!",
        'status': 500,
    },
}


class PageviewsApi(Api):  # type: ignore
    """
    Api that answers unexpected exceptions with a generic 500 instead of
    propagating them; the original traceback is still logged.
    """

    def handle_error(self, e: Exception) -> Any:
        if not isinstance(e, HTTPException):
            e = InternalError()
        return super().handle_error(e)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    path = path or os.environ.get("PAGEVIEWS_CONFIG", "config.yml")
    config = dict(DEFAULT_CONFIG)
    if os.path.exists(path):
        with open(path) as f:
            config.update(yaml.safe_load(f) or {})
    return config


def create_app(config: Optional[Dict[str, Any]] = None, wikipedia_repo: Optional[PageviewsRepo] = None) -> Flask:
    config = dict(DEFAULT_CONFIG, **(config if config is not None else load_config()))

    app = Flask(__name__)
    app.logger.setLevel(config["log_level"])
    app.config["ERROR_404_HELP"] = False
    api = PageviewsApi(app, errors=errors)

    if wikipedia_repo is None:
        wikipedia_repo = WikipediaRestRepo(
            max_concurrency=config["wikipedia_fetch_concurrency"],
            logger=app.logger,
            project=config["wikipedia_project"],
            access=config["wikipedia_access"],
            user_agent=config["wikipedia_user_agent"],
            timeout=config["wikipedia_timeout_seconds"],
        )
    aggregator = PageviewsAggregator(wikipedia_repo, logger=app.logger)
    resource_kwargs = {"logger": app.logger, "aggregator": aggregator}

    api.add_resource(TopArticles, '/top-articles/<year>/<month>/<day>',
                     '/top-articles/<year>/<month>', resource_class_kwargs=resource_kwargs)
    api.add_resource(ArticleViewsForTitle, '/article-views/<year>/<month>/<day>',
                     resource_class_kwargs=resource_kwargs)
    api.add_resource(MaxViewsDay, '/max-views-day/<year>/<month>',
                     resource_class_kwargs=resource_kwargs)

    @app.route('/')
    def hello() -> str:
        return 'Hello World!'

    app.config["PAGEVIEWS"] = config
    return app


if __name__ == '__main__':
    app = create_app()
    app.logger.setLevel('DEBUG')
    app.run(port=app.config["PAGEVIEWS"]["port"], debug=True)
