import httpx
import pytest

from item_value.config.settings import Settings
from item_value.errors import ConfigurationError, DocumentNotFound, StoreError
from item_value.store import (
    CatalogDocumentStore, FirestoreRestStore, InMemoryDocumentStore, build_store,
)
from item_value.store.firestore import decode_fields


@pytest.fixture
def catalog_csv(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text(
        "id,value,returnRate,name\n"
        "sku1,100,0.5,Helmet\n"
        "sku2,10,,Gloves\n"
        "sku1,999,0.9,Duplicate\n",
        encoding="utf-8",
    )
    return path


class TestInMemoryStore:

    @pytest.mark.asyncio
    async def test_read_and_miss(self):
        store = InMemoryDocumentStore({'c/a': {'value': 1}})

        document = await store.read('c/a', 'proj')
        assert document.get('value') == 1
        assert document.get(None) is None

        with pytest.raises(DocumentNotFound):
            await store.read('c/b')
        assert store.keys_read == ['c/a', 'c/b']


class TestCatalogStore:

    @pytest.mark.asyncio
    async def test_reads_rows_by_collection_key(self, catalog_csv):
        store = CatalogDocumentStore.from_csv(catalog_csv, collection_id='products')

        document = await store.read('products/sku1')

        assert document.data == {'value': 100, 'returnRate': 0.5, 'name': 'Helmet'}
        assert isinstance(document.data['value'], int)

    @pytest.mark.asyncio
    async def test_blank_cells_dropped(self, catalog_csv):
        store = CatalogDocumentStore.from_csv(catalog_csv, collection_id='products')

        document = await store.read('products/sku2')

        assert 'returnRate' not in document.data
        assert document.get('value') == 10

    @pytest.mark.asyncio
    async def test_duplicate_keys_keep_first(self, catalog_csv):
        store = CatalogDocumentStore.from_csv(catalog_csv, collection_id='products')
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_missing_key(self, catalog_csv):
        store = CatalogDocumentStore.from_csv(catalog_csv, collection_id='products')
        with pytest.raises(DocumentNotFound):
            await store.read('other/sku1')

    @pytest.mark.asyncio
    async def test_collection_column(self, tmp_path):
        path = tmp_path / "multi.csv"
        path.write_text("collection,id,value\na,1,5\nb,1,7\n", encoding="utf-8")
        store = CatalogDocumentStore.from_csv(path)

        assert (await store.read('a/1')).get('value') == 5
        assert (await store.read('b/1')).get('value') == 7

    def test_requires_collection(self, tmp_path):
        path = tmp_path / "bare.csv"
        path.write_text("id,value\n1,5\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            CatalogDocumentStore.from_csv(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CatalogDocumentStore.from_csv(tmp_path / "nope.csv", collection_id='c')


def firestore_store(handler, project_id='proj'):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirestoreRestStore(project_id=project_id, client=client)


class TestFirestoreStore:

    def test_decode_fields(self):
        fields = {
            'value': {'integerValue': '42'},
            'rate': {'doubleValue': 0.25},
            'name': {'stringValue': 'Helmet'},
            'active': {'booleanValue': True},
            'gone': {'nullValue': None},
            'tags': {'arrayValue': {'values': [{'stringValue': 'a'}]}},
            'meta': {'mapValue': {'fields': {'size': {'integerValue': '3'}}}},
        }
        assert decode_fields(fields) == {
            'value': 42, 'rate': 0.25, 'name': 'Helmet', 'active': True,
            'gone': None, 'tags': ['a'], 'meta': {'size': 3},
        }

    @pytest.mark.asyncio
    async def test_reads_document(self):
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(200, json={'fields': {'value': {'doubleValue': 12.5}}})

        store = firestore_store(handler)
        document = await store.read('products/sku1', 'other-proj')

        assert document.get('value') == 12.5
        assert len(requested) == 1
        assert requested[0].startswith("https://firestore.googleapis.com/v1/projects/other-proj/")
        assert requested[0].endswith("/documents/products/sku1")

    @pytest.mark.asyncio
    async def test_404_is_not_found(self):
        store = firestore_store(lambda request: httpx.Response(404, json={}))
        with pytest.raises(DocumentNotFound):
            await store.read('products/sku1')

    @pytest.mark.asyncio
    async def test_server_error_is_store_error(self):
        store = firestore_store(lambda request: httpx.Response(503))
        with pytest.raises(StoreError) as exc:
            await store.read('products/sku1')
        assert not isinstance(exc.value, DocumentNotFound)
        assert exc.value.key == 'products/sku1'

    @pytest.mark.asyncio
    async def test_transport_error_is_store_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        store = firestore_store(handler)
        with pytest.raises(StoreError):
            await store.read('products/sku1')

    @pytest.mark.asyncio
    async def test_requires_project(self):
        store = firestore_store(lambda request: httpx.Response(200), project_id=None)
        with pytest.raises(StoreError):
            await store.read('products/sku1')


class TestBuildStore:

    def test_csv_store(self, catalog_csv):
        settings = Settings(collection_id='products', value_field='value', store_csv=catalog_csv)
        assert isinstance(build_store(settings), CatalogDocumentStore)

    @pytest.mark.asyncio
    async def test_firestore_store(self):
        settings = Settings(collection_id='products', value_field='value', project_id='proj')
        store = build_store(settings)
        assert isinstance(store, FirestoreRestStore)
        await store.close()

    def test_memory_store_by_default(self):
        settings = Settings(collection_id='products', value_field='value')
        assert isinstance(build_store(settings), InMemoryDocumentStore)
