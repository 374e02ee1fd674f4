import httpx


def test_missing_url(client):
    response = client.get("/proxy")
    assert response.status_code == 400
    assert response.text == "Missing url param"


def test_streams_body_with_copied_content_type(client, upstream):
    upstream.responses["/img.jpg"] = lambda request: httpx.Response(
        200, content=b"\xff\xd8jpegbytes", headers={"content-type": "image/jpeg"}
    )
    response = client.get("/proxy", params={"url": "https://images.test/img.jpg"})

    assert response.status_code == 200
    assert response.content == b"\xff\xd8jpegbytes"
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["cache-control"] == "public, max-age=31536000"


def test_double_encoded_url_is_decoded(client, upstream):
    upstream.responses["/a b.png"] = lambda request: httpx.Response(200, content=b"png")
    response = client.get("/proxy", params={"url": "https%3A%2F%2Fimages.test%2Fa%20b.png"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/octet-stream"
    assert "Authorization" not in upstream.requests[0].headers


def test_upstream_failure_status_is_mirrored(client, upstream):
    upstream.responses["/gone.png"] = lambda request: httpx.Response(404, text="Not Found")
    response = client.get("/proxy", params={"url": "https://images.test/gone.png"})

    assert response.status_code == 404
    assert response.text == "Not Found"


def test_unreachable_target(client, upstream):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream.responses["/down.png"] = refuse
    response = client.get("/proxy", params={"url": "https://images.test/down.png"})

    assert response.status_code == 500
    assert response.text == "proxy error"
