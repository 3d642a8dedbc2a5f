"""page_scout.crawler: обход сайта, фильтрация URL и разбор sitemap."""
