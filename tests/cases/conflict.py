from names import ClassName, Import
from specs import FileSpec


def build():
    return FileSpec(
        "com.example",
        "Conflict",
        imports=[Import(ClassName("java.util", "Date")), Import(ClassName("java.sql", "Date"))],
    )
