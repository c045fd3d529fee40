from specs import FileSpec, TypeSpec


def build():
    return FileSpec("com.example", "Empty", members=[TypeSpec.enum("Empty")])
