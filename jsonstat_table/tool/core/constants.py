# header/label cell scopes
SCOPE_COL = 'col'
SCOPE_COLGROUP = 'colgroup'
SCOPE_ROW = 'row'
SCOPE_ROWGROUP = 'rowgroup'

# css classes of the html table
CSS_TABLE = 'jst-viz'
CSS_NUM_ROW_DIMS = 'numRowDims'
CSS_LAST_DIM_SIZE = 'lastDimSize'
CSS_ROW_DIM = 'rowdim'
CSS_FIRST = 'first'
CSS_LAST = 'last'

# auto split: all but the last two dimensions go to rows
AUTO_NUM_COL_DIMS = 2

DEFAULT_SHEET_NAME = 'table'
MAX_COLUMN_WIDTH = 80
MIN_COLUMN_WIDTH = 8
