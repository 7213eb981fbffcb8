from postman_to_openapi.converter.url import parse_url
from postman_to_openapi.converter.variables import VariableResolver

RESOLVER = VariableResolver({"baseUrl": "https://api.example.com"})


class TestParseUrl:
    def test_full_url(self):
        url = parse_url("https://api.example.com/users/:id?expand=true", RESOLVER)
        assert url.server == "https://api.example.com"
        assert url.path_template == "/users/{id}"
        assert url.path_params == ["id"]
        assert url.group == ""

    def test_variables_resolved_before_split(self):
        url = parse_url("{{baseUrl}}/orders", RESOLVER)
        assert url.server == "https://api.example.com"
        assert url.path_template == "/orders"

    def test_unresolved_segment_variable_becomes_param(self):
        url = parse_url("{{baseUrl}}/users/{{userId}}/posts/:postId", RESOLVER)
        assert url.path_template == "/users/{userId}/posts/{postId}"
        assert url.path_params == ["userId", "postId"]

    def test_defined_segment_variable_is_substituted(self):
        url = parse_url("https://x.io/users/{{id}}", VariableResolver({"id": "7"}))
        assert url.path_template == "/users/7"
        assert url.path_params == []

    def test_unresolved_host_passes_through(self):
        url = parse_url("{{otherHost}}/ping", RESOLVER)
        assert url.server == "{{otherHost}}"
        assert url.path_template == "/ping"

    def test_params_in_order_without_duplicates(self):
        url = parse_url("https://x.io/:a/:b/:a", RESOLVER)
        assert url.path_template == "/{a}/{b}/{a}"
        assert url.path_params == ["a", "b"]

    def test_host_without_scheme(self):
        url = parse_url("localhost:3000/health", RESOLVER)
        assert url.server == "localhost:3000"
        assert url.path_template == "/health"

    def test_relative_url_has_no_server(self):
        url = parse_url("/health", RESOLVER)
        assert url.server == ""
        assert url.path_template == "/health"

    def test_domain_only(self):
        url = parse_url("https://api.example.com", RESOLVER)
        assert url.path_template == "/"
        assert url.path_params == []

    def test_empty_segments_dropped(self):
        url = parse_url("https://x.io//users/", RESOLVER)
        assert url.path_template == "/users"


class TestPathDepth:
    def test_keeps_last_segments(self):
        url = parse_url("https://x.io/api/v1/users/:id/orders/:orderId", RESOLVER, path_depth=2)
        assert url.path_template == "/orders/{orderId}"
        assert url.path_params == ["orderId"]
        assert url.group == "/api/v1/users/{id}"

    def test_depth_zero_uses_full_path(self):
        url = parse_url("https://x.io/api/v1/users/:id", RESOLVER, path_depth=0)
        assert url.path_template == "/api/v1/users/{id}"
        assert url.group == ""

    def test_depth_larger_than_path(self):
        url = parse_url("https://x.io/users/:id", RESOLVER, path_depth=5)
        assert url.path_template == "/users/{id}"
        assert url.group == ""
