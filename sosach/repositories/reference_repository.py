from sosach.repositories.common.mongo_repository import MongoRepository


class DepartmentRepository(MongoRepository):
    collection_name = "departments"


class UnitRepository(MongoRepository):
    collection_name = "units"


class RankRepository(MongoRepository):
    collection_name = "ranks"


class PositionRepository(MongoRepository):
    collection_name = "positions"


class BookRepository(MongoRepository):
    collection_name = "books"


class BookEntryRepository(MongoRepository):
    collection_name = "book_entries"
