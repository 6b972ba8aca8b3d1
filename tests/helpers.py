"""Sample KBBI pages and fake HTTP transports shared by the tests."""

import httpx

from kbbi_lookup.core.session import AUTH_COOKIE
from kbbi_lookup.models import DEFAULT_HOST

HOST = DEFAULT_HOST


RUMAH_PAGE = """
<html><body>
<nav><a id="loginLink" href="/Account/Login">Masuk</a></nav>
<div class="container body-content">
<h2>Hasil Pencarian</h2>
<hr/>
<h2 style="margin-bottom:3px">ru.mah<sup>1</sup> <span class="syllable">ru·mah</span></h2>
<ol>
<li><font color="red"><i><span title="Nomina: kata benda">n</span></i></font> bangunan untuk tempat tinggal</li>
<li><font color="red"><i><span title="Nomina: kata benda">n</span></i></font> bangunan pada umumnya (seperti gedung); tempat tinggal: <font color="grey"><i>rumah makan; rumah sakit</i></font></li>
<li><a href="/entri/wisma">wisma</a></li>
</ol>
<h2 style="margin-bottom:3px">ru.mah<sup>2</sup></h2>
<ul class="adjusted-par">
<li><font color="red"><i><span title="Verba: kata kerja">v</span></i></font> → <a href="/entri/merumahkan">merumahkan</a></li>
<li>→ <a href="/entri/berumah">berumah</a></li>
</ul>
<h2 style="color:gray">Tesaurus</h2>
<ol><li>griya; wisma</li></ol>
<hr/>
<p>Kamus Besar Bahasa Indonesia</p>
</div>
</body></html>
"""

NOT_FOUND_PAGE = """
<html><body>
<nav><a id="loginLink" href="/Account/Login">Masuk</a></nav>
<div class="container body-content">
<h4>Entri tidak ditemukan.</h4>
<p>Berikut beberapa saran entri lain yang mirip.</p>
<div class="row">
<div class="col-md-3"><a href="/entri/rumah">rumah</a></div>
<div class="col-md-3"><a href="/entri/rumahan">rumahan</a></div>
</div>
</div>
</body></html>
"""

MEMBER_PAGE = """
<html><body>
<nav><a href="/Account/Logout">Keluar</a></nav>
<div class="container body-content">
<hr/>
<h2 style="margin-bottom:3px"><span class="rootword"><a href="/entri/hadir">hadir<sup>1</sup></a> &#187; </span>ke.ha.dir.an <small><span class="entrisButton">Usulkan perubahan</span></small> <small><b>kehadhiran</b></small></h2>
<b>Etimologi:</b><span>[<i style="color:darkred">Arab</i> <span style="color:red">n</span> <b>ḥāḍir</b> 'hadir; ada']</span>
<ol>
<li><span class="entrisButton">Usulkan</span><font color="red"><i><span title="Nomina: kata benda">n</span></i></font> <font color="green">cak</font> hal hadir; adanya: <font color="grey"><i>kehadirannya sangat diharapkan</i></font></li>
<li>Usulkan makna baru</li>
</ol>
<h4>Kata Turunan</h4>
<ul><li><a href="/entri/berkehadiran">berkehadiran</a></li></ul>
<h4>Gabungan Kata</h4>
<ul><li><a href="/entri/kehadiran%20tuhan">kehadiran Tuhan</a></li></ul>
<hr/>
<h4>Peribahasa (mengandung [kehadiran])</h4>
<ul><li><a href="/entri/ada%20gula%20ada%20semut">ada gula ada semut</a></li></ul>
<h4>Idiom (mengandung [kehadiran])</h4>
<ul><li><a href="/entri/hadir%20di%20hati">hadir di hati</a></li></ul>
</div>
</body></html>
"""

VARIANT_PAGE = """
<html><body>
<hr/>
<h2 style="margin-bottom:3px">ak.tif <small>varian: aktiv, aktip</small></h2>
<ol><li><font color="red"><i><span title="Adjektiva: kata sifat">a</span></i></font> giat (bekerja, berusaha)</li></ol>
<hr/>
</body></html>
"""

PRECATEGORIAL_PAGE = """
<html><body>
<hr/>
<h2 style="margin-bottom:3px">ju.ang</h2>
<font color="darkgreen" title="Prakategorial: kata tidak dipakai dalam bentuk dasarnya">prakategorial</font> berjuang; pejuang; perjuangan
<ol><li>tidak ikut dihitung</li></ol>
<hr/>
</body></html>
"""


class FakeSleep:
    """Records requested sleeps instead of sleeping."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def make_client(handler) -> httpx.Client:
    """HTTP client answering every request with ``handler``."""
    return httpx.Client(
        transport=httpx.MockTransport(handler),
        follow_redirects=True
    )


def page_handler(html: str, status_code: int = 200, requests: list = None):
    """Handler returning a fixed page, optionally recording requests."""
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, text=html)
    return handler


def redirect_handler(path: str, html: str = "", requests: list = None):
    """Handler redirecting entry lookups to ``path`` on the host."""
    target = f"{DEFAULT_HOST}/{path}"

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if str(request.url) == target:
            return httpx.Response(200, text=html)
        return httpx.Response(302, headers={"Location": target})
    return handler


LOGIN_FORM = """
<form action="/Account/Login" method="post">
<input name="__RequestVerificationToken" type="hidden" value="tok123" />
<input name="Posel" /><input name="KataSandi" type="password" />
</form>
"""


def login_handler(password="rahasia", requests=None):
    """Fake login endpoint accepting a single password."""
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        path = request.url.path
        if path == "/Account/Login" and request.method == "GET":
            return httpx.Response(200, text=LOGIN_FORM)
        if path == "/Account/Login":
            form = dict(
                pair.split("=", 1) for pair in request.content.decode().split("&")
            )
            if form.get("KataSandi") == password and form.get("__RequestVerificationToken") == "tok123":
                return httpx.Response(
                    302,
                    headers={
                        "Location": f"{HOST}/",
                        "Set-Cookie": f"{AUTH_COOKIE}=abc123; path=/; HttpOnly",
                    },
                )
            return httpx.Response(200, text=LOGIN_FORM)
        return httpx.Response(200, text="<html>Beranda</html>")
    return handler
