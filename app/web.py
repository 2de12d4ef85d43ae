"""HTML page rendering for the browse grid and detail overlay."""

from __future__ import annotations

import re
from html import escape
from textwrap import dedent
from urllib.parse import quote

from .config import Settings
from .models import GENRES, BrowseState, DetailRecord, SearchStub


PAGE_TEMPLATE = dedent(
    """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>__APP_NAME__</title>
    <style>
        :root {
            color-scheme: dark;
            font-family: 'Inter', 'Segoe UI', system-ui, -apple-system, sans-serif;
            --surface: #1f2937;
            --surface-muted: #111827;
            --surface-strong: #374151;
            --text-primary: #f9fafb;
            --text-muted: #9ca3af;
            --accent: #ef4444;
            --accent-strong: #dc2626;
            --gold: #eab308;
            background: var(--surface-muted);
            color: var(--text-primary);
        }
        * {
            box-sizing: border-box;
        }
        body {
            margin: 0;
            min-height: 100vh;
            background: var(--surface-muted);
        }
        header {
            background: var(--surface);
            box-shadow: 0 10px 15px rgba(0, 0, 0, 0.4);
        }
        header h1 {
            margin: 0;
            padding: 1rem;
            text-align: center;
            color: var(--accent);
            font-size: clamp(1.75rem, 4vw, 2.5rem);
            font-weight: 800;
        }
        form.search, form.genre {
            display: flex;
            justify-content: center;
            gap: 0;
            padding: 1rem;
            background: var(--surface);
        }
        form.genre {
            gap: 1rem;
            align-items: center;
        }
        input[type="text"], select {
            width: 100%;
            max-width: 32rem;
            padding: 0.5rem;
            border: 1px solid #4b5563;
            border-radius: 0.375rem 0 0 0.375rem;
            background: var(--surface-strong);
            color: var(--text-primary);
        }
        select {
            max-width: 14rem;
            border-radius: 0.375rem;
        }
        button {
            padding: 0.5rem 1rem;
            border: none;
            border-radius: 0 0.375rem 0.375rem 0;
            background: var(--accent);
            color: var(--text-primary);
            cursor: pointer;
        }
        button:hover {
            background: var(--accent-strong);
        }
        main {
            max-width: 1280px;
            margin: 0 auto;
            padding: 2rem 0;
        }
        .status {
            text-align: center;
            font-size: 1.25rem;
            color: var(--text-muted);
        }
        .status.error {
            color: #f87171;
        }
        .grid {
            display: grid;
            grid-template-columns: repeat(2, minmax(0, 1fr));
            gap: 1.5rem;
            padding: 1.5rem;
        }
        @media (min-width: 640px) { .grid { grid-template-columns: repeat(3, minmax(0, 1fr)); } }
        @media (min-width: 768px) { .grid { grid-template-columns: repeat(4, minmax(0, 1fr)); } }
        @media (min-width: 1024px) { .grid { grid-template-columns: repeat(5, minmax(0, 1fr)); } }
        .card {
            display: block;
            background: var(--surface);
            border-radius: 0.5rem;
            overflow: hidden;
            color: inherit;
            text-decoration: none;
            box-shadow: 0 20px 25px rgba(0, 0, 0, 0.35);
            transition: transform 0.3s;
        }
        .card:hover {
            transform: scale(1.02);
        }
        .card img {
            width: 100%;
            height: 20rem;
            object-fit: cover;
        }
        .card h3 {
            margin: 0;
            padding: 1rem 1rem 0;
            font-size: 1.1rem;
            white-space: nowrap;
            overflow: hidden;
            text-overflow: ellipsis;
        }
        .card p {
            margin: 0;
            padding: 0 1rem 1rem;
            color: var(--text-muted);
            font-size: 0.875rem;
        }
        form.load-more {
            display: flex;
            justify-content: center;
        }
        form.load-more button {
            border-radius: 0.375rem;
            padding: 0.75rem 2rem;
        }
        .overlay {
            position: fixed;
            inset: 0;
            background: rgba(0, 0, 0, 0.9);
            overflow-y: auto;
            display: flex;
            justify-content: center;
            padding: 1rem;
            z-index: 50;
        }
        .overlay article {
            position: relative;
            background: var(--surface);
            border-radius: 0.75rem;
            max-width: 56rem;
            width: 100%;
            margin: 1rem;
            padding: 1.5rem;
            align-self: flex-start;
        }
        .overlay form.close {
            position: absolute;
            top: 1rem;
            right: 1rem;
        }
        .overlay form.close button {
            background: none;
            font-size: 2rem;
            font-weight: 700;
        }
        .overlay h2 {
            color: var(--accent);
            border-bottom: 1px solid var(--surface-strong);
            padding-bottom: 0.5rem;
        }
        .overlay .body {
            display: flex;
            flex-wrap: wrap;
            gap: 1.5rem;
        }
        .overlay .body img {
            width: 100%;
            max-width: 18rem;
            border-radius: 0.5rem;
        }
        .overlay .plot {
            font-style: italic;
            color: #d1d5db;
            font-size: 1.15rem;
        }
        .overlay .genre-value {
            color: #f87171;
        }
        .overlay .rating-value {
            color: var(--gold);
            font-weight: 700;
        }
    </style>
</head>
<body>
    <header>
        <h1>&#127916; __APP_NAME__</h1>
        <form class="search" method="post" action="/search">
            <input type="text" name="query" placeholder="Search for a movie..." value="__QUERY__" />
            <button type="submit">Search</button>
        </form>
        __GENRE_FILTER__
    </header>
    <main>
        __CONTENT__
    </main>
    __OVERLAY__
</body>
</html>
"""
).strip()

PLACEHOLDER_RE = re.compile(r"__(?:APP_NAME|QUERY|GENRE_FILTER|CONTENT|OVERLAY)__")


def render_genre_filter(selected_genre: str) -> str:
    options = ['<option value="">All Genres</option>']
    for genre in GENRES:
        selected = " selected" if genre == selected_genre else ""
        options.append(
            f'<option value="{escape(genre)}"{selected}>{escape(genre)}</option>'
        )
    return (
        '<form class="genre" method="post" action="/genre">'
        '<label for="genre-select">Filter by Genre:</label>'
        f'<select id="genre-select" name="genre" onchange="this.form.submit()">{"".join(options)}</select>'
        "<noscript><button type=\"submit\">Apply</button></noscript>"
        "</form>"
    )


def render_card(item: SearchStub, settings: Settings) -> str:
    poster = item.poster_or_placeholder(settings.poster_placeholder_url)
    return (
        f'<a class="card" href="/movies/{quote(item.id, safe="")}">'
        f'<img src="{escape(poster)}" alt="{escape(item.title)} Poster" loading="lazy" />'
        f"<h3>{escape(item.title)}</h3>"
        f"<p>({escape(item.year)})</p>"
        "</a>"
    )


def render_content(state: BrowseState, settings: Settings) -> str:
    """Return the main content area for the current state."""

    if state.loading:
        return '<p class="status">Loading...</p>'
    if state.error:
        return f'<p class="status error">Error: {escape(state.error)}</p>'
    if not state.has_searched:
        return '<p class="status">Search for a movie title above.</p>'
    if not state.loaded_count:
        return '<p class="status">No movies found.</p>'

    if state.displayed_items:
        cards = "".join(render_card(item, settings) for item in state.displayed_items)
        content = f'<div class="grid">{cards}</div>'
    else:
        content = (
            f'<p class="status">No {escape(state.selected_genre)} movies'
            " in the loaded results.</p>"
        )
    if not state.has_reached_end:
        content += (
            '<form class="load-more" method="post" action="/load-more">'
            '<button type="submit">Load More</button>'
            "</form>"
        )
    return content


def render_detail(record: DetailRecord, settings: Settings) -> str:
    poster = record.poster_or_placeholder(settings.poster_placeholder_url)
    ratings = "".join(
        f"<li><strong>{escape(rating.source)}:</strong> {escape(rating.value)}</li>"
        for rating in record.source_ratings
    )
    return (
        f"<h2>{escape(record.title)} ({escape(record.year)})</h2>"
        '<div class="body">'
        f'<img src="{escape(poster)}" alt="{escape(record.title)} Poster" />'
        "<div>"
        f'<p class="plot">{escape(record.plot)}</p>'
        f'<p><strong>Genre:</strong> <span class="genre-value">{escape(", ".join(record.genres()) or record.genre)}</span></p>'
        f"<p><strong>Directed by:</strong> {escape(record.director)}</p>"
        f"<p><strong>Cast:</strong> {escape(record.actors)}</p>"
        f"<p><strong>Runtime:</strong> {escape(record.runtime)}</p>"
        f'<p><strong>IMDB Rating:</strong> <span class="rating-value">{escape(record.rating)}</span>'
        f" ({escape(record.vote_count)})</p>"
        "<h3>Ratings</h3>"
        f"<ul>{ratings}</ul>"
        "</div>"
        "</div>"
    )


def render_overlay(state: BrowseState, settings: Settings) -> str:
    if state.selected_item is not None:
        body = render_detail(state.selected_item, settings)
    elif state.detail_error:
        body = f'<p class="status error">{escape(state.detail_error)}</p>'
    elif state.detail_loading:
        body = '<p class="status">Loading details...</p>'
    else:
        return ""
    return (
        '<div class="overlay"><article>'
        '<form class="close" method="post" action="/close">'
        '<button type="submit" aria-label="Close">&times;</button>'
        "</form>"
        f"{body}"
        "</article></div>"
    )


def render_browse_page(state: BrowseState, settings: Settings) -> str:
    """Return the full HTML for the browse page."""

    replacements = {
        "__APP_NAME__": escape(settings.app_name),
        "__QUERY__": escape(state.query),
        "__GENRE_FILTER__": render_genre_filter(state.selected_genre),
        "__CONTENT__": render_content(state, settings),
        "__OVERLAY__": render_overlay(state, settings),
    }
    return PLACEHOLDER_RE.sub(lambda match: replacements[match.group(0)], PAGE_TEMPLATE)
