"""
The LUBM queries as rule texts.

See http://swat.cse.lehigh.edu/projects/lubm/queries-sparql.txt
The relation `f(s, p, o)` is served by the triple store. Class hierarchies are not inferred, so queries over a super
class are asked about the concrete class the generator writes.
"""

from typing_extensions import List

FACT = "f(s, p, o)."


def query_1(course: str = "edu:University0.Department0/GraduateCourse5") -> str:
    """
    Graduate students that take a given graduate course.
    Large input and high selectivity.
    """
    return f"""
        {FACT}

        q(x) :-
            f(x, ub:takesCourse, <{course}>),
            f(x, rdf:type, ub:GraduateStudent).
    """


def query_2() -> str:
    """
    Graduate students that are member of a department of the university they got their undergraduate degree from.
    Triangular pattern of three classes and three properties.
    """
    return f"""
        {FACT}

        q(y, z, x) :-
            f(y, rdf:type, ub:University),

            f(x, ub:undergraduateDegreeFrom, y),
            f(x, rdf:type, ub:GraduateStudent),
            f(x, ub:memberOf, z),

            f(z, rdf:type, ub:Department),
            f(z, ub:subOrganizationOf, y).
    """


def query_3(author: str = "edu:University0.Department0/AssistantProfessor0") -> str:
    """
    Publications of a given author.
    """
    return f"""
        {FACT}

        q(x) :-
            f(x, ub:publicationAuthor, <{author}>),
            f(x, rdf:type, ub:Publication).
    """


def query_4(department: str = "edu:University0.Department0") -> str:
    """
    Name, email address and telephone of the faculty working for a given department.
    Small input, multiple properties of a single class.
    """
    return f"""
        {FACT}

        q(x, name, email, phone) :-
            f(x, ub:worksFor, <{department}>),
            f(x, ub:name, name),
            f(x, ub:emailAddress, email),
            f(x, ub:telephone, phone).
    """


def query_5(department: str = "edu:University0.Department0") -> str:
    """
    Undergraduate students that are member of a given department.
    """
    return f"""
        {FACT}

        q(x) :-
            f(x, ub:memberOf, <{department}>),
            f(x, rdf:type, ub:UndergraduateStudent).
    """


def query_6() -> str:
    """
    All undergraduate students. Large input and low selectivity.
    """
    return f"""
        {FACT}

        q(x) :-
            f(x, rdf:type, ub:UndergraduateStudent).
    """


def query_7(teacher: str = "edu:University0.Department0/AssistantProfessor0") -> str:
    """
    Undergraduate students that take a course of a given teacher, with that course.
    """
    return f"""
        {FACT}

        q(x, y) :-
            f(<{teacher}>, ub:teacherOf, y),
            f(y, rdf:type, ub:Course),

            f(x, ub:takesCourse, y),
            f(x, rdf:type, ub:UndergraduateStudent).
    """


def query_8(university: str = "edu:University0") -> str:
    """
    Members of the departments of a given university with their email address.
    """
    return f"""
        {FACT}

        q(y, x, email) :-
            f(y, ub:subOrganizationOf, <{university}>),
            f(y, rdf:type, ub:Department),

            f(x, ub:memberOf, y),
            f(x, ub:emailAddress, email).
    """


def query_9() -> str:
    """
    Students that take a course taught by their advisor.
    Triangular pattern with the most classes and properties of the query set.
    """
    return f"""
        {FACT}

        q(x) :-
            f(x, ub:advisor, y),
            f(y, ub:teacherOf, z),
            f(x, ub:takesCourse, z).
    """


def lubm_queries() -> List[str]:
    return [
        query_1(),
        query_2(),
        query_3(),
        query_4(),
        query_5(),
        query_6(),
        query_7(),
        query_8(),
        query_9(),
    ]
