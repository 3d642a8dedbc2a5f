"""page_scout.parser: разбор sitemap.xml, robots.txt и HTML-страниц."""
