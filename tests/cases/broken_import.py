from specs import FileSpec
from specs.missing import Nothing


def build():
    return FileSpec("com.example", "Broken", members=[Nothing])
