import html

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from media_repo.config.settings import Settings

router = APIRouter()

API_KEY_PLACEHOLDER = "__API_KEY__"

INDEX_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>Simple Music &amp; Video Repo</title>
<style>
  body {
    font-family: system-ui, sans-serif;
    background: #fff;
    color: #374151;
    margin: 0; padding: 0; min-height: 100vh;
    display: flex; flex-direction: column; align-items: center;
  }
  main { max-width: 600px; width: 100%; padding: 2rem; }
  h1 { font-weight: 700; font-size: 2rem; margin-bottom: 0.5rem; }
  input[type="file"] { margin-top: 0.25rem; }
  button {
    margin-top: 0.75rem;
    padding: 0.5rem 1.25rem;
    font-weight: 600;
    background: #111827;
    color: #fff;
    border: none;
    border-radius: 6px;
    cursor: pointer;
  }
  button:hover { background: #374151; }
  #apiKey {
    margin-top: 1rem;
    padding: 0.5rem 0;
    font-family: monospace;
    background: #f3f4f6;
    border-radius: 6px;
    text-align: center;
    user-select: all;
  }
  .section { margin-top: 2rem; }
  .file-list { margin-top: 1rem; border-top: 1px solid #e5e7eb; padding-top: 1rem; }
  .file-list-item { margin-bottom: 0.75rem; word-break: break-all; }
  a.file-link { color: #2563eb; text-decoration: none; }
  a.file-link:hover { text-decoration: underline; }
</style>
</head>
<body>
  <main>
    <h1>Simple Music &amp; Video Repository</h1>
    <p>Your API key (use to access /api/files?apikey=YOUR_API_KEY):</p>
    <div id="apiKey">__API_KEY__</div>

    <section class="section" aria-labelledby="uploadMusicLabel">
      <h2 id="uploadMusicLabel">Upload Music</h2>
      <form id="musicForm" data-endpoint="/upload/music" enctype="multipart/form-data">
        <input type="file" name="music" accept="audio/*" required />
        <button type="submit">Upload Music</button>
      </form>
      <div id="musicFiles" class="file-list"></div>
    </section>

    <section class="section" aria-labelledby="uploadVideoLabel">
      <h2 id="uploadVideoLabel">Upload Video</h2>
      <form id="videoForm" data-endpoint="/upload/video" enctype="multipart/form-data">
        <input type="file" name="video" accept="video/*" required />
        <button type="submit">Upload Video</button>
      </form>
      <div id="videoFiles" class="file-list"></div>
    </section>
  </main>

  <script>
    const apiKey = document.getElementById('apiKey').textContent;
    const musicFilesDiv = document.getElementById('musicFiles');
    const videoFilesDiv = document.getElementById('videoFiles');

    async function fetchFiles() {
      try {
        const res = await fetch('/api/files?apikey=' + encodeURIComponent(apiKey));
        if (!res.ok) throw new Error('Failed to fetch files, status ' + res.status);
        const data = await res.json();
        displayFiles(data.music, musicFilesDiv);
        displayFiles(data.videos, videoFilesDiv);
      } catch (e) {
        console.error(e);
      }
    }

    function displayFiles(files, container) {
      if (!files.length) {
        container.innerHTML = '<p>No files uploaded yet.</p>';
        return;
      }
      container.innerHTML = '';
      files.forEach(file => {
        const a = document.createElement('a');
        a.href = file.url;
        a.target = '_blank';
        a.rel = 'noopener noreferrer';
        a.textContent = file.name;
        a.className = 'file-link';
        const div = document.createElement('div');
        div.className = 'file-list-item';
        div.appendChild(a);
        container.appendChild(div);
      });
    }

    document.querySelectorAll('form[data-endpoint]').forEach(form => {
      form.addEventListener('submit', async e => {
        e.preventDefault();
        try {
          const res = await fetch(form.dataset.endpoint, {
            method: 'POST',
            headers: { 'x-api-key': apiKey },
            body: new FormData(form)
          });
          if (!res.ok) {
            alert('Upload failed: ' + await res.text());
            return;
          }
          form.reset();
          fetchFiles();
        } catch (err) {
          alert('Upload error');
          console.error(err);
        }
      });
    });

    fetchFiles();
  </script>
</body>
</html>
"""


def render_index_page(api_key: str) -> str:
    """Fill the configured key into the page; the page script sends it back on every call."""
    # Keys containing HTML metacharacters (& < > " ') appear entity-escaped
    # in the markup; the script reads the element's textContent, which
    # decodes them back to the exact key.
    return INDEX_PAGE.replace(API_KEY_PLACEHOLDER, html.escape(api_key))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(request: Request) -> HTMLResponse:
    settings: Settings = request.app.state.settings
    return HTMLResponse(render_index_page(settings.api_key))
