import json

import pytest
from unittest.mock import MagicMock

from acigate.config import Settings
from acigate.exceptions import APIError, AuthenticationError
from acigate.models.aci import ClassQueryResult, ManagedObject, OperationResult
from acigate.response import Res
from acigate.services import aci as aci_service
from tests.conftest import EMPTY_RESPONSE, TENANT_LIST, TENANT_SINGLE, TENANT_T2


def _res(body) -> Res:
    return Res.parse(json.dumps(body).encode(), 200)


@pytest.fixture
def mock_client(mocker):
    client = MagicMock()
    mocker.patch("acigate.services.aci.get_client", return_value=client)
    return client


class TestGetClient:
    def test_requires_url(self, mocker):
        mocker.patch("acigate.services.aci.get_settings", return_value=Settings(apic_url=""))
        aci_service.get_client.cache_clear()
        with pytest.raises(AuthenticationError, match="APIC_URL"):
            aci_service.get_client()

    def test_builds_from_settings(self, mocker):
        mocker.patch(
            "acigate.services.aci.get_settings",
            return_value=Settings(apic_url="https://apic/", apic_username="u", apic_password="p", apic_max_retries=1),
        )
        aci_service.get_client.cache_clear()
        client = aci_service.get_client()
        assert client.url == "https://apic"
        assert client.state.retry.max_retries == 1
        assert aci_service.get_client() is client
        aci_service.get_client.cache_clear()


class TestGetClass:
    def test_returns_objects(self, mock_client):
        mock_client.get_class.return_value = _res(TENANT_LIST).get("imdata")
        result = aci_service.get_class("fvTenant")
        assert isinstance(result, ClassQueryResult)
        assert result.count == 2
        assert result.objects[0].class_name == "fvTenant"
        assert result.objects[0].dn == "uni/tn-t1"
        assert result.objects[0].children[0].class_name == "fvBD"
        assert result.objects[1].attributes["name"] == "t2"

    def test_empty(self, mock_client):
        mock_client.get_class.return_value = _res(EMPTY_RESPONSE).get("imdata")
        result = aci_service.get_class("fvTenant")
        assert result.count == 0
        assert result.objects == []

    def test_forwards_params_as_query_option(self, mock_client):
        mock_client.get_class.return_value = _res(EMPTY_RESPONSE).get("imdata")
        aci_service.get_class("fvTenant", {"rsp-subtree": "children"})
        args = mock_client.get_class.call_args.args
        assert args[0] == "fvTenant"
        assert len(args) == 2

    def test_no_params_no_options(self, mock_client):
        mock_client.get_class.return_value = _res(EMPTY_RESPONSE).get("imdata")
        aci_service.get_class("fvTenant")
        mock_client.get_class.assert_called_once_with("fvTenant")

    def test_propagates_errors(self, mock_client):
        mock_client.get_class.side_effect = APIError("400", "{}")
        with pytest.raises(APIError):
            aci_service.get_class("fvXYZ")


class TestGetObject:
    def test_returns_object(self, mock_client):
        mock_client.get_dn.return_value = _res(TENANT_SINGLE).get("imdata.0")
        result = aci_service.get_object("uni/tn-t1")
        assert isinstance(result, ManagedObject)
        assert result.dn == "uni/tn-t1"
        mock_client.get_dn.assert_called_once_with("uni/tn-t1")

    def test_missing_returns_none(self, mock_client):
        mock_client.get_dn.return_value = _res(EMPTY_RESPONSE).get("imdata.0")
        assert aci_service.get_object("uni/tn-nope") is None


class TestWrites:
    def test_post(self, mock_client):
        mock_client.post.return_value = _res(EMPTY_RESPONSE)
        payload = {"fvTenant": {"attributes": {"name": "t1"}}}
        result = aci_service.post_object("uni/tn-t1", payload)
        assert isinstance(result, OperationResult)
        assert result.method == "POST"
        mock_client.post.assert_called_once_with("uni/tn-t1", payload)

    def test_delete(self, mock_client):
        mock_client.delete_dn.return_value = _res(EMPTY_RESPONSE)
        result = aci_service.delete_object("uni/tn-t1")
        assert result.dn == "uni/tn-t1"
        assert result.method == "DELETE"
        mock_client.delete_dn.assert_called_once_with("uni/tn-t1")


class TestStatus:
    def test_unauthenticated(self, mock_client):
        mock_client.url = "https://apic"
        mock_client.state.token_age.return_value = None
        status = aci_service.get_status()
        assert status.authenticated is False
        assert status.token_age_seconds is None

    def test_authenticated(self, mock_client):
        mock_client.url = "https://apic"
        mock_client.state.token_age.return_value = 12.5
        status = aci_service.get_status()
        assert status.authenticated is True
        assert status.token_age_seconds == 12.5


class TestManagedObject:
    def test_from_imdata_without_attributes(self):
        obj = ManagedObject.from_imdata({"topSystem": {}})
        assert obj.class_name == "topSystem"
        assert obj.dn is None
        assert obj.children == []

    def test_from_imdata_empty_element(self):
        assert ManagedObject.from_imdata({}) is None

    def test_from_imdata_non_dict_body(self):
        obj = ManagedObject.from_imdata({"fvTenant": "unexpected"})
        assert obj.class_name == "fvTenant"
        assert obj.attributes == {}

    def test_from_imdata_skips_empty_children(self):
        obj = ManagedObject.from_imdata({"fvTenant": {"attributes": {"dn": "uni/tn-t1"}, "children": [{}, TENANT_T2]}})
        assert [child.dn for child in obj.children] == ["uni/tn-t2"]


class TestMalformedImdata:
    def test_get_class_skips_empty_elements(self, mock_client):
        body = {"totalCount": "3", "imdata": [{}, TENANT_LIST["imdata"][1], "junk"]}
        mock_client.get_class.return_value = _res(body).get("imdata")
        result = aci_service.get_class("fvTenant")
        assert result.count == 1
        assert result.objects[0].dn == "uni/tn-t2"

    def test_get_object_empty_element(self, mock_client):
        mock_client.get_dn.return_value = _res({"totalCount": "1", "imdata": [{}]}).get("imdata.0")
        assert aci_service.get_object("uni/tn-t1") is None
