"""
Just a list of dtypes that we care about.
Kept as strings so numpy and cupy can both
resolve them in our Array class.
"""
float16    = "float16"
float32    = "float32"
float64    = "float64"
int32      = "int32"
int64      = "int64"
bool       = "bool"

### Sampled outcome indices always come back as int32 ###
index_dtype = int32
