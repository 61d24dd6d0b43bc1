"""
__init__.py for the blog_capture package.

blog_capture takes a list of blog posts (date, name, link, title), captures the
title region of each post in a headless browser, stacks a synthetic address bar
on top of every screenshot, and builds an Excel report with the images embedded.

Modules:
    capture      => batch orchestration (one browser, one context per post)
    region       => title-region detection strategies
    address_bar  => browser-chrome header and composite HTML
    store        => session directories and artifact naming
    report       => Excel export
    server       => FastAPI app
    main         => CLI
"""

__all__ = []
