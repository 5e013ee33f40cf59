"""Minimal gallery page backed by the photo API."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["gallery"])


@router.get("/gallery", response_class=HTMLResponse)
async def gallery() -> HTMLResponse:
    """Gallery page that lists recent photos with download links."""
    return HTMLResponse(_GALLERY_HTML)


_GALLERY_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Photobooth Gallery</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      #grid { display: grid; gap: 1rem;
              grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); }
      figure { margin: 0; background: #111; padding: 0.5rem; border-radius: 8px; }
      img { width: 100%; aspect-ratio: 4 / 3; object-fit: cover; }
      figcaption { color: #ccc; font-size: 0.8rem; margin-top: 0.4rem; }
      a { color: #8cf; }
    </style>
  </head>
  <body>
    <h1>Photobooth Gallery</h1>
    <p id="status">Loading...</p>
    <div id="grid"></div>
    <script>
      async function loadPhotos() {
        const status = document.getElementById('status');
        const grid = document.getElementById('grid');
        const res = await fetch('/api/photos');
        if (!res.ok) {
          status.textContent = 'Error: ' + res.status;
          return;
        }
        const photos = await res.json();
        status.textContent = photos.length ? '' : 'No photos yet.';
        for (const photo of photos) {
          const figure = document.createElement('figure');
          const img = document.createElement('img');
          img.src = photo.data_url;
          img.alt = photo.filename;
          const caption = document.createElement('figcaption');
          const link = document.createElement('a');
          link.href = '/api/photos/' + photo.id + '/download';
          link.textContent = 'Download';
          caption.textContent = new Date(photo.created_at).toLocaleString() + ' ';
          caption.appendChild(link);
          figure.appendChild(img);
          figure.appendChild(caption);
          grid.appendChild(figure);
        }
      }
      loadPhotos();
    </script>
  </body>
</html>
"""
