"""Release notes: download, caching and rendering to HTML."""