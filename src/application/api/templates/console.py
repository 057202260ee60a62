"""
Authoring Console

Static HTML page served on ``GET /`` without a ``url`` parameter. It signs
requests in the browser (Web Crypto HMAC-SHA256) with a secret the user
types once and keeps in localStorage, then previews the signed URL.

Empty width/height fields are signed as the server-side defaults so the
generated URL always verifies.
"""

CONSOLE_HTML = r"""<!doctype html>
<html lang="en"><meta charset="utf-8">
<title>Screenshot Gateway</title>
<style>
  body{font-family:system-ui,sans-serif;max-width:640px;margin:2rem auto;padding:0 1rem;}
  h1{font-size:1.5rem;margin:0 0 1rem;}
  label{display:block;margin-top:1rem;font-weight:600;}
  input,textarea{width:100%;padding:.5rem;border:1px solid #ccc;border-radius:4px;box-sizing:border-box;}
  button{margin-top:1rem;padding:.6rem 1.2rem;border:0;border-radius:4px;background:#006eff;color:#fff;font-weight:600;cursor:pointer;}
  button.link{background:none;color:#006eff;padding:0;margin-left:1rem;}
  img{max-width:100%;display:block;margin-top:1rem;border:1px solid #eee;}
  code{word-break:break-all;display:block;background:#f6f8fa;padding:.5rem;border-radius:4px;}
</style>
<body>
<h1>Screenshot Gateway console</h1>
<form id="shotForm">
  <label>Target URL
    <input name="url" required placeholder="https://example.com">
  </label>
  <label>Version
    <input name="version" value="1" required>
  </label>
  <label>Width (100-3840)
    <input name="w" value="1200">
  </label>
  <label>Height (100-2160 or "full")
    <input name="h" value="800">
  </label>
  <label>JavaScript to inject (optional)
    <textarea name="js" rows="2" placeholder="document.body.style.background='pink'"></textarea>
  </label>
  <label>CSS to inject (optional)
    <textarea name="css" rows="2" placeholder="h1{font-size:72px;}"></textarea>
  </label>
  <button type="submit">Generate screenshot</button>
  <button type="button" class="link" id="forgetSecret">Forget secret</button>
</form>

<h2 id="urlHeader" style="display:none">Signed URL</h2>
<code id="signedUrl"></code>
<img id="preview" alt="Preview">

<script>
const SECRET_KEY = 'SCREENSHOT_SECRET';
const form  = document.getElementById('shotForm');
const outEl = document.getElementById('signedUrl');
const imgEl = document.getElementById('preview');
const hdrEl = document.getElementById('urlHeader');

const gatewayOrigin = location.origin + location.pathname.replace(/\/[^/]*$/, '') + '/';

document.getElementById('forgetSecret').addEventListener('click', () => {
  localStorage.removeItem(SECRET_KEY);
});

form.addEventListener('submit', async (ev) => {
  ev.preventDefault();

  let secret = localStorage.getItem(SECRET_KEY);
  if (!secret) {
    secret = prompt('Enter your SCREENSHOT_SECRET:');
    if (!secret) return;
    localStorage.setItem(SECRET_KEY, secret);
  }

  const data    = new FormData(form);
  const url     = data.get('url').trim();
  const version = data.get('version').trim();
  const w       = data.get('w').trim() || '1200';
  const h       = data.get('h').trim() || '800';
  const js      = data.get('js').trim();
  const css     = data.get('css').trim();

  const msg = [url, version, w, h, js, css].join('|');
  const sig = await hmac256(secret, msg);

  const qs = new URLSearchParams({ url, version, w, h, sig });
  if (js)  qs.append('js', js);
  if (css) qs.append('css', css);

  const signedUrl = gatewayOrigin + '?' + qs.toString();
  outEl.textContent = signedUrl;
  hdrEl.style.display = '';
  imgEl.src = signedUrl;
});

async function hmac256(key, msg) {
  const enc = new TextEncoder();
  const keyData = await crypto.subtle.importKey('raw', enc.encode(key),
    { name: 'HMAC', hash: 'SHA-256' }, false, ['sign']);
  const sig = await crypto.subtle.sign('HMAC', keyData, enc.encode(msg));
  return [...new Uint8Array(sig)].map(b => b.toString(16).padStart(2, '0')).join('');
}
</script>
</body></html>
"""
