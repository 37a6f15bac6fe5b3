from typing import Optional, Dict, Any, List
from pymongo import MongoClient, IndexModel, ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from bson import ObjectId
from app.core.config import settings


def _as_object_id(id: str) -> Any:
    # Analyses created by other services may use plain string ids
    return ObjectId(id) if ObjectId.is_valid(id) else id


class MongoStorage:
    def __init__(self, collection_name: str, client: Optional[MongoClient] = None):
        self.client = client or MongoClient(settings.mongodb_uri)
        self.db: Database = self.client[settings.database_name]
        self.collection: Collection = self.db[collection_name]
        self._setup_indexes()

    def _setup_indexes(self):
        pass

    @staticmethod
    def _with_id(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if document:
            document["id"] = str(document["_id"])
            del document["_id"]
        return document

    def find_one(self, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._with_id(self.collection.find_one(filter_dict))

    def find_many(self, filter_dict: Dict[str, Any], sort: Optional[List] = None) -> List[Dict[str, Any]]:
        cursor = self.collection.find(filter_dict)
        if sort:
            cursor = cursor.sort(sort)
        return [self._with_id(result) for result in cursor]

    def find_by_id(self, id: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"_id": _as_object_id(id)})


class AnalysisStorage(MongoStorage):
    def __init__(self, client: Optional[MongoClient] = None):
        super().__init__("analyses", client)

    def _setup_indexes(self):
        indexes = [
            IndexModel([("project_id", 1)]),
            IndexModel([("organization_id", 1)]),
        ]
        self.collection.create_indexes(indexes)

    def does_analysis_belong_to_project(self, analysis_id: str, project_id: str, org_id: str) -> bool:
        analysis = self.find_by_id(analysis_id)
        if not analysis:
            return False
        return analysis.get("project_id") == project_id and analysis.get("organization_id") == org_id


class ResultStorage(MongoStorage):
    def __init__(self, client: Optional[MongoClient] = None):
        super().__init__("results", client)

    def _setup_indexes(self):
        indexes = [
            IndexModel([("analysis_id", 1), ("plugin", 1)], unique=True),
        ]
        self.collection.create_indexes(indexes)

    def find_by_analysis_and_plugins(self, analysis_id: str, plugins: List[str]) -> List[Dict[str, Any]]:
        return self.find_many(
            {"analysis_id": analysis_id, "plugin": {"$in": plugins}},
            sort=[("plugin", ASCENDING)],
        )


analysis_storage: Optional[AnalysisStorage] = None
result_storage: Optional[ResultStorage] = None

def get_analysis_storage() -> AnalysisStorage:
    global analysis_storage
    if not analysis_storage:
        analysis_storage = AnalysisStorage()
    return analysis_storage

def get_result_storage() -> ResultStorage:
    global result_storage
    if not result_storage:
        result_storage = ResultStorage()
    return result_storage
