"""Tests for model and Python object introspection."""

from dataclasses import dataclass, field

from model_docgen.introspection.introspector import Introspector, display_name, python_type


class Animal:
    """Something alive."""


class Pet(Animal):
    pass


class Named:
    pass


class Dog(Pet, Named):
    def __init__(self, name):
        self.name = name
        self.tricks = ['sit']
        self._secret = 'hidden'

    def __str__(self):
        return self.name


@dataclass
class Leaf:
    name: str


@dataclass
class Branch:
    title: str
    leaves: list = field(default_factory=list)
    main: Leaf | None = None
    note: str = ''


class TestPythonType:

    def test_hierarchy_from_bases(self):
        dog = python_type(Dog)
        assert dog.namespace == __name__
        assert dog.name == 'Dog'
        assert [t.name for t in dog.supertypes] == ['Pet', 'Named']
        assert dog.supertypes[0].supertypes[0].name == 'Animal'
        assert dog.supertypes[0].supertypes[0].supertypes == []

    def test_cached_per_class(self):
        assert python_type(Dog) is python_type(Dog)
        assert python_type(Dog).supertypes[0] is python_type(Pet)

    def test_documentation_from_docstring(self):
        assert python_type(Animal).documentation == 'Something alive.'


class TestDisplayName:

    def test_camel_case(self):
        assert display_name('publicationYear') == 'Publication year'

    def test_snake_case(self):
        assert display_name('first_name') == 'First name'

    def test_single_word(self):
        assert display_name('title') == 'Title'


class TestModelObjects:

    def setup_method(self):
        self.introspector = Introspector()

    def test_label_precedence(self, library_model):
        library = library_model.roots[0]
        shelf_a = library.contents[0]
        dune = library_model.objects_by_id['dune']
        assert self.introspector.label(library) == 'Central'
        assert self.introspector.label(shelf_a) == 'Shelf A'
        assert self.introspector.label(dune) == 'Book'

    def test_children_are_contents(self, library_model):
        library = library_model.roots[0]
        assert self.introspector.children(library) == library.contents

    def test_role(self, library_model):
        assert self.introspector.role(library_model.roots[0]) is None
        assert self.introspector.role(library_model.objects_by_id['dune']) == (
            'items', 'Items placed on the shelf.')

    def test_properties_declared_first_nearest_type_first(self, library_model):
        dune = library_model.objects_by_id['dune']
        names = [pd.display_name for pd in self.introspector.properties(dune)]
        assert names == ['Authors', 'Title', 'Year', 'Publisher']

    def test_property_flags(self, library_model):
        dune = library_model.objects_by_id['dune']
        by_name = {pd.display_name: pd for pd in self.introspector.properties(dune)}
        assert by_name['Authors'].is_many
        assert by_name['Authors'].value == ['Frank Herbert']
        assert by_name['Year'].category == 'Publication'
        assert by_name['Title'].description == 'Display title.'
        assert not by_name['Publisher'].is_set
        assert by_name['Publisher'].value is None

    def test_undeclared_properties_follow(self, library_model):
        dune = library_model.objects_by_id['dune']
        dune.properties['isbn'] = '978-0441013593'
        names = [pd.display_name for pd in self.introspector.properties(dune)]
        assert names[-1] == 'Isbn'


class TestPythonObjects:

    def setup_method(self):
        self.introspector = Introspector()

    def test_label_uses_str(self):
        assert self.introspector.label(Dog('Rex')) == 'Rex'

    def test_plain_object_has_no_children(self):
        assert self.introspector.children(Dog('Rex')) == []

    def test_dataclass_children(self):
        a, b, c = Leaf('a'), Leaf('b'), Leaf('c')
        branch = Branch('root', leaves=[a, b], main=c)
        assert self.introspector.children(branch) == [a, b, c]

    def test_instance_attributes_as_properties(self):
        props = self.introspector.properties(Dog('Rex'))
        assert [pd.display_name for pd in props] == ['Name', 'Tricks']
        assert props[1].is_many

    def test_dataclass_properties_skip_children(self):
        branch = Branch('root', leaves=[Leaf('a')], main=Leaf('b'))
        props = self.introspector.properties(branch)
        assert [pd.display_name for pd in props] == ['Title', 'Note']
        assert not props[1].is_set

    def test_no_icon(self):
        assert self.introspector.icon(Dog('Rex')) is None
