"""GraphQL documents used by the GitHub client."""

# Largest page GitHub returns for any connection or REST list
MAX_PAGE_SIZE = 100

COMMIT_FIELDS = """
    oid
    message
    parents(first: 3) { nodes { oid } }
    additions
    changedFiles
    deletions
    author {
        avatarUrl
        date
        email
        name
    }
    committer {
        date
        email
        name
    }
"""

GET_BLAME_QUERY = f"""query getBlameRanges(
    $owner: String!
    $repo: String!
    $ref: String!
    $path: String!
) {{
    viewer {{ name }}
    repository(owner: $owner, name: $repo) {{
        object(expression: $ref) {{
            ...on Commit {{
                blame(path: $path) {{
                    ranges {{
                        startingLine
                        endingLine
                        commit {{ {COMMIT_FIELDS} }}
                    }}
                }}
            }}
        }}
    }}
}}"""

GET_BRANCHES_QUERY = """query getBranches(
    $owner: String!
    $repo: String!
    $branchQuery: String
    $cursor: String
    $limit: Int = 100
) {
    repository(owner: $owner, name: $repo) {
        refs(query: $branchQuery, refPrefix: "refs/heads/", first: $limit, after: $cursor) {
            pageInfo {
                endCursor
                hasNextPage
            }
            nodes {
                name
                target {
                    oid
                    ...on Commit {
                        authoredDate
                        committedDate
                    }
                }
            }
        }
    }
}"""

GET_TAGS_QUERY = """query getTags(
    $owner: String!
    $repo: String!
    $tagQuery: String
    $cursor: String
    $limit: Int = 100
) {
    repository(owner: $owner, name: $repo) {
        refs(query: $tagQuery, refPrefix: "refs/tags/", first: $limit, after: $cursor, orderBy: { field: TAG_COMMIT_DATE, direction: DESC }) {
            pageInfo {
                endCursor
                hasNextPage
            }
            nodes {
                name
                target {
                    oid
                    ...on Commit {
                        authoredDate
                        committedDate
                        message
                    }
                    ...on Tag {
                        message
                        tagger { date }
                        target {
                            ...on Commit {
                                oid
                                authoredDate
                                committedDate
                                message
                            }
                        }
                    }
                }
            }
        }
    }
}"""

# Branch tips plus the few commits each branch made at one instant; only
# commits dated exactly `$since`/`$until` can match
_BRANCH_HISTORY_FIELDS = """name
                target {
                    oid
                    ...on Commit {
                        history(first: 3, since: $since, until: $until) {
                            nodes { oid }
                        }
                    }
                }"""

GET_BRANCHES_WITH_COMMITS_QUERY = f"""query getBranchesWithCommits(
    $owner: String!
    $repo: String!
    $since: GitTimestamp!
    $until: GitTimestamp!
    $cursor: String
    $limit: Int = 100
) {{
    repository(owner: $owner, name: $repo) {{
        refs(refPrefix: "refs/heads/", first: $limit, after: $cursor) {{
            pageInfo {{
                endCursor
                hasNextPage
            }}
            nodes {{
                {_BRANCH_HISTORY_FIELDS}
            }}
        }}
    }}
}}"""

GET_BRANCH_WITH_COMMITS_QUERY = f"""query getBranchWithCommits(
    $owner: String!
    $repo: String!
    $ref: String!
    $since: GitTimestamp!
    $until: GitTimestamp!
) {{
    repository(owner: $owner, name: $repo) {{
        ref(qualifiedName: $ref) {{
            {_BRANCH_HISTORY_FIELDS}
        }}
    }}
}}"""

GET_COMMITS_QUERY = f"""query getCommits(
    $owner: String!
    $repo: String!
    $ref: String!
    $path: String
    $author: CommitAuthor
    $after: String
    $limit: Int = 100
    $since: GitTimestamp
    $until: GitTimestamp
) {{
    viewer {{ name }}
    repository(name: $repo, owner: $owner) {{
        object(expression: $ref) {{
            ... on Commit {{
                history(first: $limit, author: $author, path: $path, after: $after, since: $since, until: $until) {{
                    pageInfo {{
                        endCursor
                        hasNextPage
                    }}
                    nodes {{
                        ... on Commit {{ {COMMIT_FIELDS} }}
                    }}
                }}
            }}
        }}
    }}
}}"""

GET_COMMIT_QUERY = f"""query getCommit(
    $owner: String!
    $repo: String!
    $ref: String!
) {{
    viewer {{ name }}
    repository(name: $repo, owner: $owner) {{
        object(expression: $ref) {{
            ...on Commit {{ {COMMIT_FIELDS} }}
        }}
    }}
}}"""

GET_COMMIT_COUNT_QUERY = """query getCommitCount(
    $owner: String!
    $repo: String!
    $ref: String!
) {
    repository(owner: $owner, name: $repo) {
        object(expression: $ref) {
            ... on Commit {
                history(first: 1) {
                    totalCount
                }
            }
        }
    }
}"""

GET_DEFAULT_BRANCH_QUERY = """query getDefaultBranch(
    $owner: String!
    $repo: String!
) {
    repository(owner: $owner, name: $repo) {
        defaultBranchRef {
            name
        }
    }
}"""

GET_CURRENT_USER_QUERY = """query getCurrentUser(
    $owner: String!
    $repo: String!
) {
    viewer { name, email, login, id }
    repository(owner: $owner, name: $repo) { viewerPermission }
}"""

GET_REPOSITORY_VISIBILITY_QUERY = """query getRepositoryVisibility(
    $owner: String!
    $repo: String!
) {
    repository(owner: $owner, name: $repo) {
        visibility
    }
}"""

RESOLVE_REFERENCE_QUERY = """query resolveReference(
    $owner: String!
    $repo: String!
    $ref: String!
) {
    repository(owner: $owner, name: $repo) {
        object(expression: $ref) {
            oid
        }
    }
}"""

RESOLVE_REFERENCE_FOR_PATH_QUERY = """query resolveReference(
    $owner: String!
    $repo: String!
    $ref: String!
    $path: String!
) {
    repository(owner: $owner, name: $repo) {
        object(expression: $ref) {
            ... on Commit {
                history(first: 1, path: $path) {
                    nodes { oid }
                }
            }
        }
    }
}"""
