"""
api_resource.implementations.sqlalchemy.declarative module contains the resource base
class for SQLAlchemy mapped objects.

Synopsis
--------

.. code-block:: python

   import sqlalchemy as sa
   from sqlalchemy import orm
   from api_resource.implementations.sqlalchemy import SQLAResource, paginate

   Base = orm.declarative_base()

   class Post(Base):
       __tablename__ = "posts"
       id = sa.Column(sa.Integer(), primary_key=True)
       title = sa.Column(sa.String(), nullable=False)
       published_at = sa.Column(sa.DateTime(), info={"cast": "datetime:%Y-%m-%d"})
       author_id = sa.Column(sa.Integer(), sa.ForeignKey("users.id"))
       author = orm.relationship("User")

   class PostResource(SQLAResource):
       def to_array(self, request):
           return [
               self.merge_attributes("id", "title", "published_at"),
               self.merge_when_explicitly_loaded({"author": UserResource}),
           ]

   page = paginate(session, sa.select(Post).order_by(Post.id), page=2, per_page=20)
   PostResource.build(page).with_optional_relations("author").to_paginator(request)

"""
from ...resource import Resource
from .core import SQLAInspector

default_inspector = SQLAInspector()


class SQLAResource(Resource):
    class Meta:
        inspector = default_inspector
