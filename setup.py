from Cython.Build import cythonize
from setuptools import Extension, find_packages, setup

# Pure-Python modules compiled as-is; the .py sources stay importable when
# no C compiler is available (optional=True below).
_COMPILED = ("cursor", "scalars", "containers")

cythonized_extensions = cythonize(
    [
        Extension(
            f"picopack.codec.{name}",
            [f"src/picopack/codec/{name}.py"],
            extra_compile_args=[
                "-O3",
                "-Wno-unused-function",
                "-Wno-unused-variable",
            ],
            language="c",
        )
        for name in _COMPILED
    ],
    compiler_directives={
        "language_level": 3,
        "annotation_typing": False,
        "boundscheck": False,
        "wraparound": False,
        "cdivision": True,
        "nonecheck": False,
        "initializedcheck": False,
    },
    build_dir="build/cython",
)
for ext in cythonized_extensions:
    ext.optional = True

if __name__ == "__main__":
    setup(
        packages=find_packages(where="src"),
        package_dir={"": "src"},
        ext_modules=cythonized_extensions,
    )
