#!/usr/bin/env python3
"""
Command-line interface for Blogwright.
"""

import os
import sys
import json
import time
import argparse
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, TemplateError

from .article import parse_date
from .core import Blog, BlogSnapshot, setup_logging
from .errors import BlogError, InvalidConfiguration
from .manifest import build_manifest
from .options import BlogOptions
from .paths import render, slugify
from .settings import BlogSettings
from .sources import FileSourceProvider

DEFAULT_ARTICLE_TEMPLATE = os.path.join(os.path.dirname(__file__), 'templates', 'article.md.j2')

logger = logging.getLogger('Blogwright')


def build(settings: Dict[str, Any]) -> BlogSnapshot:
    """Run the pipeline over the content directory and write the manifest."""
    blog = Blog.initialize(BlogSettings.blog_options(settings))
    provider = FileSourceProvider(settings['content'])
    snapshot = blog.attach(provider)

    output_dir = os.path.expanduser(settings['output'])
    os.makedirs(output_dir, exist_ok=True)
    manifest_path = os.path.join(output_dir, settings['manifest'])
    with open(manifest_path, 'w', encoding='utf-8') as f:
        json.dump(build_manifest(snapshot), f, indent=2)
    logger.info(f"Wrote manifest with {len(snapshot.resources)} resources to {manifest_path}")
    return snapshot


def create_article(settings: Dict[str, Any], title: str, date: Optional[str] = None,
                   lang: Optional[str] = None, tags: Optional[List[str]] = None) -> str:
    """
    Create a new article source from the article template.

    The file name comes from the ``sources`` pattern plus ``default_extension``.

    Returns:
        Path of the created file
    """
    options = BlogOptions.from_mapping(BlogSettings.blog_options(settings))
    if date:
        article_date = parse_date(date, options.tz)
        if article_date is None:
            raise InvalidConfiguration('date', f"cannot read {date!r} as a date")
    else:
        article_date = datetime.now(options.tz).replace(microsecond=0)

    tokens = {
        'year': f'{article_date.year:04d}',
        'month': f'{article_date.month:02d}',
        'day': f'{article_date.day:02d}',
        'title': slugify(title),
        'lang': lang or options.default_locale,
    }
    relative_path = render(options.sources, tokens, source=f"new article '{title}'") + options.default_extension
    article_path = os.path.join(settings['content'], relative_path.lstrip('/'))
    if os.path.exists(article_path):
        raise FileExistsError(f"Article already exists: {article_path}")

    template_path = options.new_article_template or DEFAULT_ARTICLE_TEMPLATE
    env = Environment(loader=FileSystemLoader(os.path.dirname(os.path.abspath(template_path))),
                      keep_trailing_newline=True)
    content = env.get_template(os.path.basename(template_path)).render(
        title=title,
        date=article_date.isoformat(),
        tags=tags or [],
        lang=lang,
    )

    os.makedirs(os.path.dirname(article_path) or '.', exist_ok=True)
    with open(article_path, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info(f"Created article: {article_path}")
    return article_path


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Blogwright - blog pages for static sites')
    parser.add_argument('--content', type=str,
                        help='Content directory containing the blog sources')
    parser.add_argument('--output', type=str,
                        help='Directory the manifest is written to')
    parser.add_argument('--manifest', type=str,
                        help='File name of the manifest inside the output directory')
    parser.add_argument('--prefix', type=str,
                        help='Path prefix to mount the blog at')
    parser.add_argument('--permalink', type=str,
                        help='Path template for articles, e.g. /{year}/{title}.html')
    parser.add_argument('--paginate', action='store_const', const=True,
                        help='Paginate listing pages')
    parser.add_argument('--per-page', dest='per_page', type=int,
                        help='Number of articles per page when paginating')
    parser.add_argument('--publish-future-dated', dest='publish_future_dated', action='store_const', const=True,
                        help='Publish articles dated in the future')
    parser.add_argument('--time-zone', dest='time_zone', type=str,
                        help='Time zone article dates are read in')
    parser.add_argument('--logs', type=str,
                        help='Directory for log files')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file')
    parser.add_argument('--article', type=str, metavar='TITLE',
                        help='Create a new article with this title instead of building')
    parser.add_argument('--date', type=str,
                        help='Date of the new article (default: now)')
    parser.add_argument('--lang', type=str,
                        help='Language of the new article')
    parser.add_argument('--tags', type=str,
                        help='Comma-separated tags for the new article')
    parser.add_argument('--version', action='version', version='%(prog)s 1.0.0')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = create_parser().parse_args(argv)

    # Handle init command
    if args.init:
        settings_loader = BlogSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")
        return

    try:
        # Load settings from configuration file
        settings_loader = BlogSettings()
        settings_loader.load_settings()

        # Command line arguments take precedence
        args_dict = {k: v for k, v in vars(args).items() if v is not None}
        final_settings = settings_loader.merge_with_args(args_dict)

        setup_logging(final_settings['logs'])

        if args.article:
            tags = [tag.strip() for tag in args.tags.split(',')] if args.tags else []
            create_article(final_settings, args.article, date=args.date, lang=args.lang, tags=tags)
            return

        start_time = time.time()
        build(final_settings)
        logger.info(f"Build completed in {time.time() - start_time:.6f} seconds.")

    except (BlogError, TemplateError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
